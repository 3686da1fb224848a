from practice_starter.app.models.user import User, UserData
from practice_starter.app.schemas.user import UserRequest, UserResponse


def to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        mobile_number=user.mobile_number,
        name=user.name,
        address=user.address,
    )


def to_entity(request: UserRequest) -> User:
    return User(
        data=UserData(
            email=request.email,
            mobile_number=request.mobile_number,
            name=request.name,
            address=request.address,
        ),
    )
