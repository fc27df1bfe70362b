"""Exception types shared by the statistics core, the meal store and the API layer."""


class NutrilogError(Exception):
    """Base class for all application errors."""


class InvalidInputError(NutrilogError, ValueError):
    """Raised for malformed meal records or an unsupported statistics period."""


class MealStoreError(NutrilogError):
    """The meal store could not be read or written."""


class MealNotFoundError(NutrilogError):
    """No meal with the given id exists for the user."""


class QuotaExceededError(NutrilogError):
    def __init__(self, limit: int):
        super().__init__(
            f"Daily AI analysis limit reached ({limit}). Upgrade your subscription for more analyses."
        )
        self.limit = limit


__all__ = ['NutrilogError', 'InvalidInputError', 'MealStoreError', 'MealNotFoundError', 'QuotaExceededError']
