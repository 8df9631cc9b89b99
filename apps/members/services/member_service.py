"""
Member lookup used by the ledger before any mutation.
"""
from ..models import Member
from apps.common.exceptions import MemberNotFound


class MemberService:
    """Member existence checks and per-member serialization"""

    @staticmethod
    def get_member_by_id(member_id):
        """Return an active member or raise MemberNotFound"""
        try:
            return Member.objects.get(pk=member_id, is_active=True)
        except (Member.DoesNotExist, ValueError, TypeError):
            raise MemberNotFound(member_id)

    @staticmethod
    def lock_member(member_id, active_only=True):
        """
        Lock the member row for the rest of the current transaction.

        Every ledger write for a member takes this lock first, which
        serializes concurrent spends of the same balance. Must be called
        inside transaction.atomic(). Expiry passes active_only=False since
        a deactivated member's points still run out.
        """
        members = Member.objects.select_for_update()
        if active_only:
            members = members.filter(is_active=True)
        try:
            return members.get(pk=member_id)
        except (Member.DoesNotExist, ValueError, TypeError):
            raise MemberNotFound(member_id)
