"""Errors raised by the rate pipeline and its providers."""

from __future__ import annotations

THROTTLE_MESSAGE = "Çok hızlı yenileme. Lütfen {seconds} saniye bekleyin."


class FxLiraError(RuntimeError):
    """Base class for every error raised by :mod:`fx_lira`."""


class ThrottleError(FxLiraError):
    """A fetch was attempted before the minimum interval elapsed."""

    def __init__(self, wait_seconds: int) -> None:
        self.wait_seconds = wait_seconds
        super().__init__(THROTTLE_MESSAGE.format(seconds=wait_seconds))


class ProviderUnavailable(FxLiraError):
    """One upstream tier failed or returned nothing usable."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class AllProvidersExhausted(FxLiraError):
    """Every tier failed; no quotes could be resolved for this cycle."""

    def __init__(self, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        detail = "; ".join(self.errors) if self.errors else "no providers configured"
        super().__init__(f"Kurlar yüklenemedi ({detail})")


class InvalidNumericInput(FxLiraError, ValueError):
    """A parsed rate was missing, non-finite or not strictly positive."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid numeric value for {field}: {value!r}")


__all__ = [
    "THROTTLE_MESSAGE",
    "FxLiraError",
    "ThrottleError",
    "ProviderUnavailable",
    "AllProvidersExhausted",
    "InvalidNumericInput",
]
