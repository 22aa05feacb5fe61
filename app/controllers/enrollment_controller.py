# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: enroll users in mailing lists, read users and list members.

Enrollment errors are not caught here; the handlers registered in
``app.error_handlers`` turn them into responses.
"""
from fastapi import APIRouter, Depends

from app.core.dependencies import get_notifier, get_user_directory
from app.schemas import EnrollRequest, ErrorResponse, ListMembers, UserOut
from app.services.enrollment_service import EnrollmentRequest, enroll

router = APIRouter(prefix="/api/v1", tags=["Enrollments"])


def _lookup_mode(strict):
    if strict is None:
        return None
    return "strict" if strict else "find_or_create"


@router.post(
    "/enrollments",
    response_model=UserOut,
    status_code=200,
    responses={
        404: {"model": ErrorResponse, "description": "Strict lookup, user not found"},
        409: {"model": ErrorResponse, "description": "User record could not be written"},
        502: {"model": ErrorResponse, "description": "Notification could not be delivered"},
    },
)
def create_enrollment(body: EnrollRequest,
                      directory=Depends(get_user_directory),
                      notifier=Depends(get_notifier)):
    user = enroll(EnrollmentRequest(
        username=body.username,
        list_id=body.list_id,
        user_directory=directory,
        notifier=notifier,
        lookup=_lookup_mode(body.strict),
    ))
    return UserOut(**user.model_dump())


@router.get("/users/{username}", response_model=UserOut,
            responses={404: {"model": ErrorResponse}})
def get_user(username: str, directory=Depends(get_user_directory)):
    return UserOut(**directory.find_by_username(username).model_dump())


@router.get("/lists/{list_id}/members", response_model=ListMembers)
def list_members(list_id: str, directory=Depends(get_user_directory)):
    members = directory.list_members(list_id)
    return ListMembers(
        list_id=list_id, total=len(members),
        members=[UserOut(**m.model_dump()) for m in members],
    )
