"""Visitman services.

Each service is bound to a RecordStore (the app's store by default):

    from visitman.services import VisitService, EligibilityService

    visits = VisitService()
    visits.direct_check_in(customer, "shop_1a2b", "4521")
    EligibilityService().is_eligible(customer, "shop_1a2b")
"""

from visitman.services.eligibility import EligibilityService, WeeklyProgress
from visitman.services.members import MemberService
from visitman.services.session import Capability, SessionController
from visitman.services.shops import ShopService
from visitman.services.visits import VisitService

__all__ = [
    "Capability",
    "EligibilityService",
    "MemberService",
    "SessionController",
    "ShopService",
    "VisitService",
    "WeeklyProgress",
]
