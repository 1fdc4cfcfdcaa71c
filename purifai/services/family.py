"""Household member directory.

A household always has exactly one member with relationship "self". Other
members (spouse, children, parents...) each own their own full set of asset
records. The active member id is kept here only as a UI convenience; storage
and aggregation calls always take a member id explicitly.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from purifai.constants import RELATIONSHIPS, SELF_RELATIONSHIP
from .time_provider import TimeProvider, get_now

logger = logging.getLogger(__name__)


class FamilyError(Exception):
    """Base exception for household operations."""
    pass


class MemberNotFoundError(FamilyError):
    """No member with the given id."""
    pass


class SelfMemberError(FamilyError):
    """Operation would leave the household without exactly one self member."""
    pass


class InvalidMemberError(FamilyError):
    """Member name or relationship is not acceptable."""
    pass


@dataclass
class ZakatMember:
    id: str
    name: str
    relationship: str
    created_at: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'relationship': self.relationship,
            'relationship_label': RELATIONSHIPS[self.relationship],
            'created_at': self.created_at,
        }


def _new_member_id(relationship: str) -> str:
    prefix = 'self' if relationship == SELF_RELATIONSHIP else 'member'
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _validate_name(name: str) -> str:
    if name is None:
        name = ''
    if not isinstance(name, str):
        raise InvalidMemberError('Member name must be a string')
    name = name.strip()
    if not name:
        raise InvalidMemberError('Member name is required')
    return name


def _validate_relationship(relationship: str) -> str:
    if not isinstance(relationship, str) or relationship not in RELATIONSHIPS:
        raise InvalidMemberError(
            f"Invalid relationship: {relationship}. Must be one of: {', '.join(RELATIONSHIPS)}"
        )
    return relationship


@dataclass
class Household:
    members: list = field(default_factory=list)
    current_member_id: str = ''

    def get_member(self, member_id: str) -> ZakatMember:
        for member in self.members:
            if member.id == member_id:
                return member
        raise MemberNotFoundError(f'Member not found: {member_id}')

    def get_self_member(self) -> Optional[ZakatMember]:
        for member in self.members:
            if member.relationship == SELF_RELATIONSHIP:
                return member
        return None

    def get_current_member(self) -> Optional[ZakatMember]:
        for member in self.members:
            if member.id == self.current_member_id:
                return member
        return None

    def ensure_self(self, name: str, time_provider: Optional[TimeProvider] = None) -> ZakatMember:
        """Create the self member on first use and make it active."""
        existing = self.get_self_member()
        if existing is not None:
            return existing

        member = ZakatMember(
            id=_new_member_id(SELF_RELATIONSHIP),
            name=(name or '').strip() or 'Self',
            relationship=SELF_RELATIONSHIP,
            created_at=get_now(time_provider).isoformat(),
        )
        self.members.insert(0, member)
        self.current_member_id = member.id
        logger.info(f"Created self member {member.id}")
        return member

    def add_member(self, name: str, relationship: str, time_provider: Optional[TimeProvider] = None) -> ZakatMember:
        name = _validate_name(name)
        relationship = _validate_relationship(relationship)
        if relationship == SELF_RELATIONSHIP and self.get_self_member() is not None:
            raise SelfMemberError('Household already has a self member')

        member = ZakatMember(
            id=_new_member_id(relationship),
            name=name,
            relationship=relationship,
            created_at=get_now(time_provider).isoformat(),
        )
        self.members.append(member)
        if not self.current_member_id:
            self.current_member_id = member.id
        logger.info(f"Added member {member.id} ({relationship})")
        return member

    def remove_member(self, member_id: str) -> ZakatMember:
        """Remove a member. The self member cannot be removed.

        If the removed member was active, the self member becomes active.
        The caller is responsible for deleting the member's asset records.
        """
        member = self.get_member(member_id)
        if member.relationship == SELF_RELATIONSHIP:
            raise SelfMemberError('The self member cannot be removed')

        self.members = [m for m in self.members if m.id != member_id]
        if self.current_member_id == member_id:
            self_member = self.get_self_member()
            if self_member is not None:
                self.current_member_id = self_member.id
            elif self.members:
                self.current_member_id = self.members[0].id
            else:
                self.current_member_id = ''
        logger.info(f"Removed member {member_id}")
        return member

    def rename_member(self, member_id: str, name: str) -> ZakatMember:
        member = self.get_member(member_id)
        member.name = _validate_name(name)
        return member

    def update_relationship(self, member_id: str, relationship: str) -> ZakatMember:
        member = self.get_member(member_id)
        relationship = _validate_relationship(relationship)
        if relationship == member.relationship:
            return member
        if member.relationship == SELF_RELATIONSHIP or relationship == SELF_RELATIONSHIP:
            raise SelfMemberError('The self relationship cannot be moved between members')
        member.relationship = relationship
        return member

    def switch_member(self, member_id: str) -> ZakatMember:
        member = self.get_member(member_id)
        self.current_member_id = member.id
        return member

    def to_dict(self) -> dict:
        return {
            'members': [member.to_dict() for member in self.members],
            'current_member_id': self.current_member_id,
        }
