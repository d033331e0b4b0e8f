"""initial portal schema

Revision ID: 0001_initial_portal_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_portal_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UUID = postgresql.UUID(as_uuid=True)
JSONB = postgresql.JSONB(astext_type=sa.Text())
ENUM = sa.String(64)


def _ts(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.TIMESTAMP(timezone=True), nullable=nullable)


def upgrade() -> None:
    """Upgrade schema."""
    # Companies and users
    op.create_table(
        'companies',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('shortname', sa.Text(), nullable=True, unique=True),
        sa.Column('business_partner_number', sa.String(20), nullable=True, unique=True),
        sa.Column('company_status', ENUM, nullable=False),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )
    op.create_table(
        'company_assigned_roles',
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('company_role', ENUM, primary_key=True),
    )
    op.create_table(
        'company_users',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('email', sa.Text(), nullable=False, unique=True),
        sa.Column('firstname', sa.Text(), nullable=True),
        sa.Column('lastname', sa.Text(), nullable=True),
        sa.Column('user_status', ENUM, nullable=False),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )
    op.create_index('ix_company_users_company_id', 'company_users', ['company_id'])
    op.create_table(
        'company_user_assigned_roles',
        sa.Column('company_user_id', UUID, sa.ForeignKey('company_users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_role', sa.Text(), primary_key=True),
    )
    op.create_table(
        'provider_company_details',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('auto_setup_url', sa.String(100), nullable=False),
        sa.Column('auto_setup_callback_url', sa.String(100), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
        sa.Column('last_editor_id', UUID, sa.ForeignKey('company_users.id'), nullable=True),
    )

    # Processes
    op.create_table(
        'processes',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('process_type', ENUM, nullable=False),
        _ts('lock_expiry_date'),
        sa.Column('version', UUID, nullable=False),
    )
    op.create_table(
        'process_steps',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('process_step_type', ENUM, nullable=False),
        sa.Column('process_step_status', ENUM, nullable=False),
        sa.Column('process_id', UUID, sa.ForeignKey('processes.id', ondelete='CASCADE'), nullable=False),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
        sa.Column('message', sa.Text(), nullable=True),
    )
    op.create_index('ix_process_steps_process_id_status', 'process_steps', ['process_id', 'process_step_status'])

    # Registration
    op.create_table(
        'company_applications',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('application_status', ENUM, nullable=False),
        sa.Column('company_application_type', ENUM, nullable=False),
        sa.Column('onboarding_service_provider_id', UUID, sa.ForeignKey('companies.id'), nullable=True),
        sa.Column('checklist_process_id', UUID, sa.ForeignKey('processes.id'), nullable=True),
        sa.Column('decline_message', sa.Text(), nullable=True),
        sa.Column('last_editor_id', UUID, sa.ForeignKey('company_users.id'), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )
    op.create_index('ix_company_applications_company_id', 'company_applications', ['company_id'])
    op.create_table(
        'application_checklist',
        sa.Column('application_id', UUID, sa.ForeignKey('company_applications.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('entry_type', ENUM, primary_key=True),
        sa.Column('entry_status', ENUM, nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )
    op.create_table(
        'invitations',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('company_application_id', UUID, sa.ForeignKey('company_applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_user_id', UUID, sa.ForeignKey('company_users.id'), nullable=False),
        sa.Column('invitation_status', ENUM, nullable=False),
        _ts('date_created', nullable=False),
    )
    op.create_index('ix_invitations_company_application_id', 'invitations', ['company_application_id'])
    op.create_table(
        'network_registrations',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('external_id', sa.Text(), nullable=False),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id'), nullable=False, unique=True),
        sa.Column('onboarding_service_provider_id', UUID, sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('application_id', UUID, sa.ForeignKey('company_applications.id'), nullable=False, unique=True),
        sa.Column('process_id', UUID, sa.ForeignKey('processes.id'), nullable=True, unique=True),
        _ts('date_created', nullable=False),
    )
    op.create_table(
        'onboarding_service_provider_details',
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('callback_url', sa.Text(), nullable=False),
        sa.Column('auth_url', sa.Text(), nullable=True),
        sa.Column('client_id', sa.Text(), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )

    # Marketplace
    op.create_table(
        'languages',
        sa.Column('short_name', sa.String(2), primary_key=True),
        sa.Column('long_name', sa.Text(), nullable=True),
    )
    op.create_table(
        'use_cases',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('shortname', sa.Text(), nullable=False),
    )
    op.create_table(
        'offer_licenses',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('licensetext', sa.Text(), nullable=False),
    )
    op.create_table(
        'offers',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('offer_type', ENUM, nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('provider', sa.Text(), nullable=False),
        sa.Column('provider_company_id', UUID, sa.ForeignKey('companies.id'), nullable=True),
        sa.Column('sales_manager_id', UUID, sa.ForeignKey('company_users.id'), nullable=True),
        sa.Column('offer_status', ENUM, nullable=False),
        sa.Column('thumbnail_url', sa.Text(), nullable=True),
        sa.Column('marketing_url', sa.Text(), nullable=True),
        sa.Column('app_url', sa.Text(), nullable=True),
        sa.Column('contact_email', sa.Text(), nullable=True),
        sa.Column('contact_number', sa.Text(), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_released'),
        _ts('date_last_changed'),
    )
    op.create_index('ix_offers_offer_type_status', 'offers', ['offer_type', 'offer_status'])
    op.create_table(
        'offer_descriptions',
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('language_short_name', sa.String(2), sa.ForeignKey('languages.short_name'), primary_key=True),
        sa.Column('description_long', sa.Text(), nullable=False),
        sa.Column('description_short', sa.Text(), nullable=False),
    )
    op.create_table(
        'offer_assigned_languages',
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('language_short_name', sa.String(2), sa.ForeignKey('languages.short_name'), primary_key=True),
    )
    op.create_table(
        'offer_assigned_use_cases',
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('use_case_id', UUID, sa.ForeignKey('use_cases.id'), primary_key=True),
    )
    op.create_table(
        'offer_assigned_licenses',
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('offer_license_id', UUID, sa.ForeignKey('offer_licenses.id'), primary_key=True),
    )
    op.create_table(
        'offer_subscriptions',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id'), nullable=False),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('offer_subscription_status', ENUM, nullable=False),
        sa.Column('requester_id', UUID, sa.ForeignKey('company_users.id'), nullable=False),
        sa.Column('last_editor_id', UUID, sa.ForeignKey('company_users.id'), nullable=True),
        sa.Column('process_id', UUID, sa.ForeignKey('processes.id'), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )
    op.create_index('ix_offer_subscriptions_offer_id_company_id', 'offer_subscriptions', ['offer_id', 'company_id'])
    op.create_table(
        'company_user_assigned_app_favourites',
        sa.Column('company_user_id', UUID, sa.ForeignKey('company_users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('app_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
    )

    # Agreements and consents
    op.create_table(
        'agreements',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('agreement_status', ENUM, nullable=False),
        sa.Column('agreement_link', sa.Text(), nullable=True),
        _ts('date_created', nullable=False),
    )
    op.create_table(
        'agreement_assigned_company_roles',
        sa.Column('agreement_id', UUID, sa.ForeignKey('agreements.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('company_role', ENUM, primary_key=True),
    )
    op.create_table(
        'agreement_assigned_offers',
        sa.Column('agreement_id', UUID, sa.ForeignKey('agreements.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'consents',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('agreement_id', UUID, sa.ForeignKey('agreements.id'), nullable=False),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('company_user_id', UUID, sa.ForeignKey('company_users.id'), nullable=False),
        sa.Column('consent_status', ENUM, nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('target', sa.Text(), nullable=True),
        _ts('date_created', nullable=False),
        _ts('date_last_changed'),
    )
    op.create_index('ix_consents_company_id_agreement_id', 'consents', ['company_id', 'agreement_id'])
    op.create_table(
        'consent_assigned_offers',
        sa.Column('consent_id', UUID, sa.ForeignKey('consents.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('offer_id', UUID, sa.ForeignKey('offers.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'consent_assigned_offer_subscriptions',
        sa.Column('consent_id', UUID, sa.ForeignKey('consents.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('offer_subscription_id', UUID, sa.ForeignKey('offer_subscriptions.id', ondelete='CASCADE'), primary_key=True),
    )

    # Notifications
    op.create_table(
        'notifications',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('receiver_user_id', UUID, sa.ForeignKey('company_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('notification_type', ENUM, nullable=False),
        sa.Column('creator_user_id', UUID, sa.ForeignKey('company_users.id'), nullable=True),
        sa.Column('content', JSONB, nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('done', sa.Boolean(), nullable=True),
        _ts('due_date'),
        _ts('date_created', nullable=False),
    )
    op.create_index('idx_notifications_receiver_date_created', 'notifications', ['receiver_user_id', 'date_created'])
    op.create_index('idx_notifications_receiver_is_read', 'notifications', ['receiver_user_id', 'is_read'])

    # Identity providers
    op.create_table(
        'identity_providers',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('alias', sa.Text(), nullable=False, unique=True),
        sa.Column('identity_provider_category', ENUM, nullable=False),
        sa.Column('identity_provider_type', ENUM, nullable=False),
        sa.Column('owner_id', UUID, sa.ForeignKey('companies.id'), nullable=False),
        _ts('date_created', nullable=False),
    )
    op.create_table(
        'company_identity_providers',
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('identity_provider_id', UUID, sa.ForeignKey('identity_providers.id', ondelete='CASCADE'), primary_key=True),
    )
    op.create_table(
        'company_user_identity_provider_links',
        sa.Column('company_user_id', UUID, sa.ForeignKey('company_users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('alias', sa.Text(), primary_key=True),
        sa.Column('provider_user_id', sa.Text(), nullable=False),
        sa.Column('user_name', sa.Text(), nullable=True),
    )

    # Audit
    op.create_table(
        'audit_logs',
        sa.Column('id', UUID, primary_key=True),
        sa.Column('actor_user_id', UUID, sa.ForeignKey('company_users.id'), nullable=False),
        sa.Column('company_id', UUID, sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action_type', sa.Text(), nullable=False),
        sa.Column('target_type', sa.Text(), nullable=False),
        sa.Column('target_id', UUID, nullable=True),
        sa.Column('metadata', JSONB, nullable=True),
        _ts('date_created', nullable=False),
    )
    op.create_index('ix_audit_logs_target', 'audit_logs', ['target_type', 'target_id'])
    op.create_index('ix_audit_logs_company_id_date_created', 'audit_logs', ['company_id', 'date_created'])


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        'audit_logs',
        'company_user_identity_provider_links',
        'company_identity_providers',
        'identity_providers',
        'notifications',
        'consent_assigned_offer_subscriptions',
        'consent_assigned_offers',
        'consents',
        'agreement_assigned_offers',
        'agreement_assigned_company_roles',
        'agreements',
        'company_user_assigned_app_favourites',
        'offer_subscriptions',
        'offer_assigned_licenses',
        'offer_assigned_use_cases',
        'offer_assigned_languages',
        'offer_descriptions',
        'offers',
        'offer_licenses',
        'use_cases',
        'languages',
        'onboarding_service_provider_details',
        'network_registrations',
        'invitations',
        'application_checklist',
        'company_applications',
        'process_steps',
        'processes',
        'provider_company_details',
        'company_user_assigned_roles',
        'company_users',
        'company_assigned_roles',
        'companies',
    ):
        op.drop_table(table)
