"""CRUD routes for the user resource.

Each route declares its guards in order. Body decoding runs first (as a
route-level dependency, so malformed JSON is reported before anything else),
then the ``user_id`` path parameter, then field validation. Every path also
answers with a trailing slash. Store failures propagate as typed exceptions
and are mapped by the exception handlers.
"""

from fastapi import APIRouter, status

from user_service.api.schemas.users import DeletedUserResponse, UserResponse
from user_service.api.validation import (
    FullUserInput,
    JsonBody,
    PartialUserInput,
    UserId,
)
from user_service.infrastructure.database.dependencies import UserStore

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
@router.get("/", response_model=list[UserResponse], include_in_schema=False)
async def list_users(users: UserStore) -> list[UserResponse]:
    """List every user ordered by ascending ID."""
    return [UserResponse.model_validate(user) for user in await users.list_all()]


@router.get("/{user_id}", response_model=UserResponse)
@router.get("/{user_id}/", response_model=UserResponse, include_in_schema=False)
async def get_user(user_id: UserId, users: UserStore) -> UserResponse:
    """Fetch a single user."""
    return UserResponse.model_validate(await users.get(user_id))


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[JsonBody],
)
@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[JsonBody],
    include_in_schema=False,
)
async def create_user(data: FullUserInput, users: UserStore) -> UserResponse:
    """Create a user; the store assigns the ID."""
    user = await users.create_user(data["name"], data["email"], data["age"])
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse, dependencies=[JsonBody])
@router.put(
    "/{user_id}/",
    response_model=UserResponse,
    dependencies=[JsonBody],
    include_in_schema=False,
)
async def replace_user(
    user_id: UserId, data: FullUserInput, users: UserStore
) -> UserResponse:
    """Replace name, email and age of a user."""
    user = await users.replace(user_id, data["name"], data["email"], data["age"])
    return UserResponse.model_validate(user)


@router.patch("/{user_id}", response_model=UserResponse, dependencies=[JsonBody])
@router.patch(
    "/{user_id}/",
    response_model=UserResponse,
    dependencies=[JsonBody],
    include_in_schema=False,
)
async def update_user(
    user_id: UserId, data: PartialUserInput, users: UserStore
) -> UserResponse:
    """Update only the supplied fields of a user."""
    return UserResponse.model_validate(await users.patch(user_id, data))


@router.delete("/{user_id}", response_model=DeletedUserResponse)
@router.delete(
    "/{user_id}/", response_model=DeletedUserResponse, include_in_schema=False
)
async def delete_user(user_id: UserId, users: UserStore) -> DeletedUserResponse:
    """Delete a user and return its last-known state."""
    user = await users.remove(user_id)
    return DeletedUserResponse(
        message=f"User {user.name} deleted successfully",
        user=UserResponse.model_validate(user),
    )
