# Authentication API routes for user registration, login, and profile

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.dependencies.auth import get_current_user
from app.models import User
from app.schemas import AuthResponse, UserInfo, UserLogin, UserResponse
from app.services.user_service import UserService
from app.utils.auth import create_access_token
from app.utils.images import save_image
from app.utils.logger import setup_logger

logger = setup_logger("api.auth")

router = APIRouter(prefix="/users", tags=["Authentication"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


@router.post(
    "/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def signup(
    name: str = Form(..., min_length=1, max_length=100),
    surname: str = Form(..., min_length=1, max_length=100),
    email: str = Form(..., pattern=EMAIL_PATTERN, max_length=255),
    password: str = Form(..., min_length=6, max_length=100),
    age: int | None = Form(None, ge=0, le=150),
    image: UploadFile | None = File(None),
):
    """Register a new user (multipart form with an optional avatar image)."""
    image_path = await save_image(image) if image is not None else None
    user = await UserService().signup(name, surname, age, email, password, image_path)

    token = create_access_token(user.id, user.email)
    return AuthResponse(user_id=user.id, email=user.email, token=token)


@router.post("/login", response_model=AuthResponse)
async def login(user_data: UserLogin):
    """Authenticate user and return JWT token for API access."""
    user = await UserService().authenticate(user_data.email, user_data.password)
    token = create_access_token(user.id, user.email)
    logger.debug(f"User {user.id} logged in")
    return AuthResponse(user_id=user.id, email=user.email, token=token)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Retrieve current authenticated user's profile information."""
    return UserResponse(user=UserInfo.from_model(current_user))
