"""
Status and type enums shared by models, repositories and business logic.

Values are stored as plain strings (``String`` columns); ``str`` mixins keep
comparisons against raw column values working.
"""
from enum import Enum


class CompanyStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class CompanyRole(str, Enum):
    ACTIVE_PARTICIPANT = "ACTIVE_PARTICIPANT"
    APP_PROVIDER = "APP_PROVIDER"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    OPERATOR = "OPERATOR"
    ONBOARDING_SERVICE_PROVIDER = "ONBOARDING_SERVICE_PROVIDER"


class UserStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class ApplicationStatus(str, Enum):
    CREATED = "CREATED"
    ADD_COMPANY_DATA = "ADD_COMPANY_DATA"
    INVITE_USER = "INVITE_USER"
    SELECT_COMPANY_ROLE = "SELECT_COMPANY_ROLE"
    UPLOAD_DOCUMENTS = "UPLOAD_DOCUMENTS"
    VERIFY = "VERIFY"
    SUBMITTED = "SUBMITTED"
    CONFIRMED = "CONFIRMED"
    DECLINED = "DECLINED"
    CANCELLED_BY_CUSTOMER = "CANCELLED_BY_CUSTOMER"


# An application in one of these states still counts as the company's open application.
OPEN_APPLICATION_STATUSES = (
    ApplicationStatus.CREATED,
    ApplicationStatus.ADD_COMPANY_DATA,
    ApplicationStatus.INVITE_USER,
    ApplicationStatus.SELECT_COMPANY_ROLE,
    ApplicationStatus.UPLOAD_DOCUMENTS,
    ApplicationStatus.VERIFY,
    ApplicationStatus.SUBMITTED,
)


class ApplicationType(str, Enum):
    INTERNAL = "INTERNAL"
    EXTERNAL = "EXTERNAL"


class ChecklistEntryType(str, Enum):
    REGISTRATION_VERIFICATION = "REGISTRATION_VERIFICATION"
    BUSINESS_PARTNER_NUMBER = "BUSINESS_PARTNER_NUMBER"
    IDENTITY_WALLET = "IDENTITY_WALLET"
    SELF_DESCRIPTION_LP = "SELF_DESCRIPTION_LP"
    CLEARING_HOUSE = "CLEARING_HOUSE"
    APPLICATION_ACTIVATION = "APPLICATION_ACTIVATION"


class ChecklistEntryStatus(str, Enum):
    TO_DO = "TO_DO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class ProcessType(str, Enum):
    APPLICATION_CHECKLIST = "APPLICATION_CHECKLIST"
    OFFER_SUBSCRIPTION = "OFFER_SUBSCRIPTION"
    PARTNER_REGISTRATION = "PARTNER_REGISTRATION"


class ProcessStepStatus(str, Enum):
    TODO = "TODO"
    DONE = "DONE"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"
    DUPLICATE = "DUPLICATE"


class ProcessStepType(str, Enum):
    # application checklist
    MANUAL_VERIFY_REGISTRATION = "MANUAL_VERIFY_REGISTRATION"
    CREATE_BUSINESS_PARTNER_NUMBER_PUSH = "CREATE_BUSINESS_PARTNER_NUMBER_PUSH"
    CREATE_BUSINESS_PARTNER_NUMBER_PULL = "CREATE_BUSINESS_PARTNER_NUMBER_PULL"
    CREATE_BUSINESS_PARTNER_NUMBER_MANUAL = "CREATE_BUSINESS_PARTNER_NUMBER_MANUAL"
    CREATE_IDENTITY_WALLET = "CREATE_IDENTITY_WALLET"
    START_CLEARING_HOUSE = "START_CLEARING_HOUSE"
    START_SELF_DESCRIPTION_LP = "START_SELF_DESCRIPTION_LP"
    ACTIVATE_APPLICATION = "ACTIVATE_APPLICATION"
    MANUAL_DECLINE_APPLICATION = "MANUAL_DECLINE_APPLICATION"
    # offer subscription
    TRIGGER_PROVIDER = "TRIGGER_PROVIDER"
    OFFERSUBSCRIPTION_CLIENT_CREATION = "OFFERSUBSCRIPTION_CLIENT_CREATION"
    OFFERSUBSCRIPTION_TECHNICALUSER_CREATION = "OFFERSUBSCRIPTION_TECHNICALUSER_CREATION"
    ACTIVATE_SUBSCRIPTION = "ACTIVATE_SUBSCRIPTION"
    TRIGGER_PROVIDER_CALLBACK = "TRIGGER_PROVIDER_CALLBACK"
    RETRIGGER_PROVIDER = "RETRIGGER_PROVIDER"
    RETRIGGER_OFFERSUBSCRIPTION_CLIENT_CREATION = "RETRIGGER_OFFERSUBSCRIPTION_CLIENT_CREATION"
    RETRIGGER_OFFERSUBSCRIPTION_TECHNICALUSER_CREATION = "RETRIGGER_OFFERSUBSCRIPTION_TECHNICALUSER_CREATION"
    RETRIGGER_PROVIDER_CALLBACK = "RETRIGGER_PROVIDER_CALLBACK"
    # partner registration
    SYNCHRONIZE_USER = "SYNCHRONIZE_USER"
    RETRIGGER_SYNCHRONIZE_USER = "RETRIGGER_SYNCHRONIZE_USER"
    TRIGGER_CALLBACK_OSP_SUBMITTED = "TRIGGER_CALLBACK_OSP_SUBMITTED"
    TRIGGER_CALLBACK_OSP_APPROVED = "TRIGGER_CALLBACK_OSP_APPROVED"
    TRIGGER_CALLBACK_OSP_DECLINED = "TRIGGER_CALLBACK_OSP_DECLINED"
    RETRIGGER_CALLBACK_OSP_SUBMITTED = "RETRIGGER_CALLBACK_OSP_SUBMITTED"
    RETRIGGER_CALLBACK_OSP_APPROVED = "RETRIGGER_CALLBACK_OSP_APPROVED"
    RETRIGGER_CALLBACK_OSP_DECLINED = "RETRIGGER_CALLBACK_OSP_DECLINED"
    MANUAL_DECLINE_OSP = "MANUAL_DECLINE_OSP"
    REMOVE_KEYCLOAK_USERS = "REMOVE_KEYCLOAK_USERS"
    RETRIGGER_REMOVE_KEYCLOAK_USERS = "RETRIGGER_REMOVE_KEYCLOAK_USERS"


class AgreementStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ConsentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class InvitationStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class OfferType(str, Enum):
    APP = "APP"
    SERVICE = "SERVICE"


class OfferStatus(str, Enum):
    CREATED = "CREATED"
    IN_REVIEW = "IN_REVIEW"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class SubscriptionStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class NotificationType(str, Enum):
    APP_SUBSCRIPTION_REQUEST = "APP_SUBSCRIPTION_REQUEST"
    APP_SUBSCRIPTION_ACTIVATION = "APP_SUBSCRIPTION_ACTIVATION"
    SERVICE_REQUEST = "SERVICE_REQUEST"
    APP_RELEASE_REQUEST = "APP_RELEASE_REQUEST"
    WELCOME = "WELCOME"


class IdentityProviderCategory(str, Enum):
    KEYCLOAK_OIDC = "KEYCLOAK_OIDC"
    KEYCLOAK_SAML = "KEYCLOAK_SAML"


class IdentityProviderType(str, Enum):
    OWN = "OWN"
    MANAGED = "MANAGED"
    SHARED = "SHARED"


class IdentityProviderProtocol(str, Enum):
    OIDC = "OIDC"
    SAML = "SAML"


class ClientAuthMethod(str, Enum):
    SECRET_BASIC = "SECRET_BASIC"
    SECRET_POST = "SECRET_POST"
    SECRET_JWT = "SECRET_JWT"
    JWT = "JWT"


class SignatureAlgorithm(str, Enum):
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    ES256 = "ES256"
    ES384 = "ES384"
    ES512 = "ES512"
