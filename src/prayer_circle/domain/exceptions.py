"""Domain exceptions.

Servisler iş kuralı ihlallerinde bu istisnaları fırlatır; API katmanı
``status_code`` alanına bakarak HTTP yanıtına çevirir.
"""


class PrayerCircleError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(PrayerCircleError, ValueError):
    """Geçersiz alan değeri (örn. tanımsız enum)."""

    status_code = 400


class InvalidStateError(PrayerCircleError):
    """İşlem, kaydın mevcut durumunda yapılamaz."""

    status_code = 400


class ForbiddenError(PrayerCircleError):
    """İstek sahibi bu işlemi yapmaya yetkili değil."""

    status_code = 403


class NotFoundError(PrayerCircleError):
    """Kayıt bulunamadı."""

    status_code = 404


class OperationFailedError(PrayerCircleError):
    """Beklenmeyen altyapı hatası. Mesaj genel tutulur, sebep loglanır."""

    status_code = 500
