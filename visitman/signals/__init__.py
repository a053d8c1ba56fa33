"""
Visitman signals — public event API.

Emitted signals:
- member_registered: Emitted by MemberService.register()
- shop_registered: Emitted by ShopService.register()
- shop_verification_changed: Emitted on every verification transition
- visit_recorded: Emitted by VisitService after a visit is appended
"""

from django.dispatch import Signal

member_registered = Signal()  # sender=Member, member=Member
shop_registered = Signal()  # sender=Shop, shop=Shop
shop_verification_changed = Signal()  # sender=Shop, shop=Shop, old=str, new=str, actor_code=str
visit_recorded = Signal()  # sender=Visit, visit=Visit
