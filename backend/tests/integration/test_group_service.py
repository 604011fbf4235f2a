"""Integration tests for groups and membership"""

from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from lexvault.audit.actions import AuditAction
from lexvault.documents.service import DocumentService
from lexvault.errors import InvalidTransitionError, NotFoundError, UnauthorizedError
from lexvault.groups.service import GroupService
from lexvault.models import AuditLog, DocumentType, GroupRole
from lexvault.permissions.levels import PermissionLevel
from lexvault.permissions.service import PermissionService


pytestmark = pytest.mark.integration


@pytest.fixture
def group(db_session: Session, owner):
    group = GroupService(db_session).create_group(owner, "Corporate", "M&A team")
    db_session.commit()
    return group


class TestGroups:
    """Test group creation and visibility"""

    def test_creator_is_admin_member(self, db_session: Session, owner, group):
        """Test the creator owns the group and joins as ADMIN"""
        fetched = GroupService(db_session).get_group(owner, group.id)
        assert fetched.owner_id == owner.id
        assert [(m.user_id, m.role) for m in fetched.members] == [(owner.id, GroupRole.ADMIN)]

        entry = db_session.query(AuditLog).filter_by(action=AuditAction.GROUP_CREATED.value).one()
        assert entry.entity_id == group.id

    def test_non_member_cannot_view(self, db_session: Session, member, admin, group):
        """Test strangers are refused; system admins are not"""
        service = GroupService(db_session)
        with pytest.raises(UnauthorizedError):
            service.get_group(member, group.id)
        assert service.get_group(admin, group.id).id == group.id

    def test_unknown_group(self, db_session: Session, owner):
        with pytest.raises(NotFoundError):
            GroupService(db_session).get_group(owner, uuid4())

    def test_list_groups(self, db_session: Session, owner, member, admin, group):
        """Test listing returns own and joined groups"""
        service = GroupService(db_session)
        assert service.list_groups(owner)[1] == 1
        assert service.list_groups(member)[1] == 0
        assert service.list_groups(admin)[1] == 1


class TestMembership:
    """Test adding, updating and removing members"""

    def test_add_member_and_inherit_level(self, db_session: Session, owner, member, group):
        """Test a VIEWER of the group can read a document filed under it"""
        GroupService(db_session).add_member(owner, group.id, member.id, GroupRole.VIEWER)
        document = DocumentService(db_session).create_document(
            owner, name="Term sheet.pdf", document_type=DocumentType.PDF, group_id=group.id
        )
        db_session.commit()

        permissions = PermissionService(db_session)
        assert permissions.effective_permission(member, document) == PermissionLevel.READ
        assert DocumentService(db_session).list_documents(member)[1] == 1

    def test_add_member_updates_role(self, db_session: Session, owner, member, group):
        """Test adding an existing member changes the role instead of duplicating"""
        service = GroupService(db_session)
        service.add_member(owner, group.id, member.id, GroupRole.VIEWER)
        updated = service.add_member(owner, group.id, member.id, GroupRole.EDITOR)
        db_session.commit()

        assert updated.role == GroupRole.EDITOR
        assert len(service.get_group(owner, group.id).members) == 2

    def test_viewer_cannot_manage(self, db_session: Session, owner, member, other, group):
        """Test a VIEWER member cannot add members"""
        service = GroupService(db_session)
        service.add_member(owner, group.id, member.id, GroupRole.VIEWER)

        with pytest.raises(UnauthorizedError):
            service.add_member(member, group.id, other.id)

    def test_group_admin_can_manage(self, db_session: Session, owner, member, other, group):
        """Test an ADMIN member can add members"""
        service = GroupService(db_session)
        service.add_member(owner, group.id, member.id, GroupRole.ADMIN)

        added = service.add_member(member, group.id, other.id)
        assert added.role == GroupRole.VIEWER

    def test_remove_member(self, db_session: Session, owner, member, group):
        """Test removal drops the inherited access"""
        service = GroupService(db_session)
        service.add_member(owner, group.id, member.id, GroupRole.EDITOR)
        document = DocumentService(db_session).create_document(
            owner, name="Term sheet.pdf", document_type=DocumentType.PDF, group_id=group.id
        )
        db_session.commit()

        service.remove_member(owner, group.id, member.id)
        db_session.commit()

        assert PermissionService(db_session).effective_permission(member, document) == PermissionLevel.NONE
        assert db_session.query(AuditLog).filter_by(action=AuditAction.GROUP_MEMBER_REMOVED.value).count() == 1

    def test_owner_cannot_be_removed(self, db_session: Session, owner, group):
        """Test removing the group owner is refused"""
        with pytest.raises(InvalidTransitionError):
            GroupService(db_session).remove_member(owner, group.id, owner.id)

    def test_remove_non_member(self, db_session: Session, owner, member, group):
        """Test removing someone who is not a member raises NotFoundError"""
        with pytest.raises(NotFoundError):
            GroupService(db_session).remove_member(owner, group.id, member.id)

    def test_group_admin_cannot_demote_owner(self, db_session: Session, owner, member, group):
        """Test the owner's ADMIN role cannot be lowered through add_member"""
        service = GroupService(db_session)
        service.add_member(owner, group.id, member.id, GroupRole.ADMIN)
        document = DocumentService(db_session).create_document(
            owner, name="Term sheet.pdf", document_type=DocumentType.PDF, group_id=group.id
        )
        db_session.commit()

        with pytest.raises(InvalidTransitionError):
            service.add_member(member, group.id, owner.id, GroupRole.VIEWER)

        roles = {m.user_id: m.role for m in service.get_group(owner, group.id).members}
        assert roles[owner.id] == GroupRole.ADMIN
        assert PermissionService(db_session).effective_permission(owner, document) == PermissionLevel.ADMIN

    def test_owner_role_reasserted_as_admin(self, db_session: Session, owner, group):
        """Test re-adding the owner as ADMIN is accepted"""
        member = GroupService(db_session).add_member(owner, group.id, owner.id, GroupRole.ADMIN)
        assert member.role == GroupRole.ADMIN


class TestInviteCode:
    """Test joining a group with its invite code"""

    def test_group_gets_invite_code(self, group):
        assert len(group.invite_code) == 12
        assert group.invite_code == group.invite_code.upper()

    def test_join_as_viewer(self, db_session: Session, owner, member, group):
        """Test joining grants VIEWER membership, READ on group documents and an audit entry"""
        document = DocumentService(db_session).create_document(
            owner, name="Board minutes.docx", document_type=DocumentType.DOCX, group_id=group.id
        )
        db_session.commit()

        joined = GroupService(db_session).join_by_invite_code(member, group.invite_code.lower())
        db_session.commit()

        assert joined.group_id == group.id
        assert joined.role == GroupRole.VIEWER
        assert PermissionService(db_session).effective_permission(member, document) == PermissionLevel.READ

        entry = db_session.query(AuditLog).filter_by(action=AuditAction.GROUP_JOINED.value).one()
        assert entry.actor_id == member.id
        assert entry.entity_id == group.id

    def test_invalid_code(self, db_session: Session, member, group):
        with pytest.raises(NotFoundError):
            GroupService(db_session).join_by_invite_code(member, "NOT-A-CODE")

    def test_existing_member_cannot_rejoin(self, db_session: Session, owner, group):
        """Test the owner (already ADMIN) cannot rejoin and lose the role"""
        with pytest.raises(InvalidTransitionError):
            GroupService(db_session).join_by_invite_code(owner, group.invite_code)
