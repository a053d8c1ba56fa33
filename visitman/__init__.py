"""
Django Visitman - weekly visit stamps for small shops.

Customers check in at a shop with its secret code; visiting on six different
days of the same (Sunday-start) week earns a reward.

Usage:
    from visitman.services import VisitService, EligibilityService
    from visitman.gates import Gates, GateResult

    VisitService().direct_check_in(customer, "shop_1a2b", "4521")
    EligibilityService().is_eligible(customer, "shop_1a2b")
"""


def __getattr__(name):
    if name == "VisitService":
        from visitman.services.visits import VisitService

        return VisitService
    if name == "EligibilityService":
        from visitman.services.eligibility import EligibilityService

        return EligibilityService
    if name == "Gates":
        from visitman.gates import Gates

        return Gates
    if name == "VisitmanError":
        from visitman.exceptions import VisitmanError

        return VisitmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["VisitService", "EligibilityService", "Gates", "VisitmanError"]
__version__ = "0.1.0"
