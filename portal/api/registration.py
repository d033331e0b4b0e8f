"""
Administrative retrigger endpoints for partner registration processes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from portal.api.deps import get_current_identity
from portal.db.database import get_db
from portal.db.enums import ProcessStepType
from portal.identity import IdentityData
from portal.services.network_service import NetworkService

router = APIRouter(prefix="/api/administration/registration", tags=["registration"])

RETRIGGER_ROUTES = {
    "retrigger-synchronize-users": ProcessStepType.RETRIGGER_SYNCHRONIZE_USER,
    "retrigger-callback-osp-submitted": ProcessStepType.RETRIGGER_CALLBACK_OSP_SUBMITTED,
    "retrigger-callback-osp-approved": ProcessStepType.RETRIGGER_CALLBACK_OSP_APPROVED,
    "retrigger-callback-osp-declined": ProcessStepType.RETRIGGER_CALLBACK_OSP_DECLINED,
    "retrigger-remove-keycloak-user": ProcessStepType.RETRIGGER_REMOVE_KEYCLOAK_USERS,
}


def _register_retrigger_route(path: str, step_type: ProcessStepType) -> None:
    def retrigger(
        external_id: str,
        db: Session = Depends(get_db),
        identity: IdentityData = Depends(get_current_identity),
    ):
        NetworkService(db).retrigger_process_step(identity, external_id, step_type)

    retrigger.__name__ = path.replace("-", "_")
    router.add_api_route(
        f"/network/{{external_id}}/{path}",
        retrigger,
        methods=["POST"],
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Retrigger {step_type.value}",
    )


for _path, _step_type in RETRIGGER_ROUTES.items():
    _register_retrigger_route(_path, _step_type)
