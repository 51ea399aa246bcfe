"""FastAPI application - pets, admin feed and accounts over HTTP."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError as PydanticValidationError

from daily_dose.app_state import AppState, create_app_state
from daily_dose.config import get_catalog
from daily_dose.errors import (
    AdminAccessDenied,
    AuthError,
    ConfigurationError,
    DailyDoseError,
    DuplicateEmail,
    PetNotFound,
    ValidationError,
)
from daily_dose.media import encode_image_bytes
from daily_dose.models import (
    AdminItemType,
    AdPlan,
    BillingCycle,
    PaymentConfig,
    Pet,
    PetProfile,
    User,
)
from daily_dose.services import PlanRequest, buy_link

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Created at startup
_state: AppState | None = None
# Strong references so scheduled computations are not garbage collected
_tasks: set[asyncio.Task] = set()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    global _state
    _state = create_app_state()
    yield
    for task in list(_tasks):
        task.cancel()
    _state = None


app = FastAPI(
    title="Daily Dose",
    description="Pet nutrition planner with an admin-curated news and ad feed",
    version="0.1.0",
    lifespan=lifespan,
)


def _app_state() -> AppState:
    if _state is None:
        raise RuntimeError("Application not started")
    return _state


_STATUS_BY_ERROR: list[tuple[type[DailyDoseError], int]] = [
    (PetNotFound, 404),
    (ValidationError, 400),
    (DuplicateEmail, 409),
    (AuthError, 401),
    (AdminAccessDenied, 403),
    (ConfigurationError, 503),
]


@app.exception_handler(DailyDoseError)
async def domain_error_handler(request: Request, exc: DailyDoseError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 500)
    return JSONResponse({"error": type(exc).__name__, "message": str(exc)}, status_code=status)


def _schedule(request: PlanRequest) -> None:
    """Run the computation in the background; the pet is already Loading."""
    state = _app_state()

    async def _process():
        try:
            await state.pets.run(request)
        except Exception as e:
            logger.exception("Plan computation for %s crashed: %s", request.pet_id, e)

    task = asyncio.create_task(_process())
    _tasks.add(task)
    task.add_done_callback(_tasks.discard)


def _pet_view(pet: Pet) -> dict[str, Any]:
    view = pet.to_record()
    view["status"] = pet.status.value
    return view


# Health


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check. review_mode means no LLM credential is configured."""
    state = _app_state()
    return {"status": "ok", "review_mode": state.review_mode}


@app.get("/catalog")
async def catalog() -> dict[str, Any]:
    """Form suggestions: breeds, medical conditions, brands."""
    data = get_catalog()
    return {
        "breeds": data.get("breeds", {}),
        "medical_conditions": data.get("medical_conditions", []),
        "food_brands": data.get("food_brands", []),
    }


# Pets


@app.get("/pets")
async def list_pets() -> list[dict[str, Any]]:
    return [_pet_view(p) for p in _app_state().pets.pets]


@app.get("/pets/{pet_id}")
async def get_pet(pet_id: str) -> dict[str, Any]:
    pet = _app_state().pets.get(pet_id)
    if pet is None:
        raise PetNotFound(f"No pet with id {pet_id}")
    return _pet_view(pet)


@app.post("/pets", status_code=202)
async def create_pet(body: dict[str, Any]) -> dict[str, Any]:
    state = _app_state()
    request = state.pets.begin_create(PetProfile.from_form(body))
    _schedule(request)
    return _pet_view(state.pets.get(request.pet_id))


@app.put("/pets/{pet_id}")
async def edit_pet(pet_id: str, body: dict[str, Any]) -> JSONResponse:
    state = _app_state()
    request = state.pets.begin_edit(pet_id, PetProfile.from_form(body))
    if request is None:
        return JSONResponse({"changed": False, "pet": _pet_view(state.pets.get(pet_id))})
    _schedule(request)
    return JSONResponse(
        {"changed": True, "pet": _pet_view(state.pets.get(pet_id))},
        status_code=202,
    )


@app.post("/pets/{pet_id}/refresh", status_code=202)
async def refresh_pet(pet_id: str) -> dict[str, Any]:
    state = _app_state()
    request = state.pets.begin_refresh(pet_id)
    _schedule(request)
    return _pet_view(state.pets.get(pet_id))


@app.delete("/pets/{pet_id}")
async def delete_pet(pet_id: str, confirm: bool = False) -> dict[str, bool]:
    return {"deleted": _app_state().pets.delete_pet(pet_id, confirmed=confirm)}


@app.get("/pets/{pet_id}/links")
async def pet_buy_links(pet_id: str) -> dict[str, list[dict[str, str]]]:
    pet = _app_state().pets.get(pet_id)
    if pet is None:
        raise PetNotFound(f"No pet with id {pet_id}")
    if pet.result is None:
        return {"wet": [], "dry": []}
    recs = pet.result.recommendations
    return {
        kind: [{"name": r.name, "url": buy_link(r, pet.species)} for r in items]
        for kind, items in (("wet", recs.wet), ("dry", recs.dry))
    }


# Admin feed


class UnlockRequest(BaseModel):
    passphrase: str


class NewItemRequest(BaseModel):
    type: AdminItemType
    title: str = ""
    content: str = ""
    image_url: str = ""
    link_url: str = ""
    background_color: str | None = None
    text_color: str | None = None


class NewPageRequest(BaseModel):
    name: str


class ReorderRequest(BaseModel):
    from_index: int
    to_index: int


@app.get("/admin/items")
async def list_items() -> list[dict[str, Any]]:
    return [i.to_record() for i in _app_state().feed.items]


@app.post("/admin/unlock")
async def admin_unlock(body: UnlockRequest) -> dict[str, bool]:
    feed = _app_state().feed
    feed.unlock(body.passphrase)
    return {"unlocked": feed.is_unlocked}


@app.post("/admin/lock")
async def admin_lock() -> dict[str, bool]:
    feed = _app_state().feed
    feed.lock()
    return {"unlocked": feed.is_unlocked}


@app.post("/admin/items", status_code=201)
async def add_item(body: NewItemRequest) -> dict[str, Any]:
    colors = {
        k: v
        for k, v in (("background_color", body.background_color), ("text_color", body.text_color))
        if v
    }
    item = _app_state().feed.add_item(
        body.type,
        title=body.title,
        content=body.content,
        image_url=body.image_url,
        link_url=body.link_url,
        **colors,
    )
    return item.to_record()


@app.post("/admin/pages", status_code=201)
async def add_page(body: NewPageRequest) -> dict[str, Any]:
    item = _app_state().feed.add_page(body.name)
    if item is None:
        raise ValidationError("Page name is required.")
    return item.to_record()


@app.delete("/admin/items/{item_id}")
async def delete_item(item_id: str) -> dict[str, bool]:
    return {"deleted": _app_state().feed.delete_item(item_id)}


@app.post("/admin/reorder")
async def reorder_items(body: ReorderRequest) -> list[dict[str, Any]]:
    items = _app_state().feed.reorder(body.from_index, body.to_index)
    return [i.to_record() for i in items]


@app.get("/admin/payment-config")
async def get_payment_config() -> dict[str, Any]:
    return _app_state().feed.payment_config.to_record()


@app.put("/admin/payment-config")
async def put_payment_config(body: dict[str, Any]) -> dict[str, Any]:
    feed = _app_state().feed
    try:
        config = PaymentConfig.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid payment links: {e.error_count()} error(s)") from e
    feed.update_payment_config(config)
    return feed.payment_config.to_record()


@app.get("/advertise/payment-url")
async def payment_url(plan: AdPlan, cycle: BillingCycle) -> dict[str, str]:
    return {"url": _app_state().feed.payment_url(plan, cycle)}


# Media


@app.post("/media/images")
async def upload_image(request: Request) -> dict[str, str]:
    """Raw image body in, data URI out. The client stores it as the pet's imageUrl."""
    mime_type = request.headers.get("content-type", "").split(";")[0].strip()
    return {"imageUrl": encode_image_bytes(await request.body(), mime_type)}


# Accounts


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


@app.post("/auth/register", status_code=201)
async def register(body: RegisterRequest) -> dict[str, Any]:
    user = _app_state().auth.register(User(name=body.name, email=body.email), body.password)
    return user.to_record()


@app.post("/auth/login")
async def login(body: LoginRequest) -> dict[str, Any]:
    return _app_state().auth.login(body.email, body.password).to_record()


@app.post("/auth/logout")
async def logout() -> dict[str, bool]:
    _app_state().auth.logout()
    return {"logged_in": False}


@app.get("/auth/me")
async def me() -> dict[str, Any]:
    user = _app_state().auth.current_user
    return {"user": user.to_record() if user else None}


@app.get("/signup-prompt")
async def signup_prompt() -> dict[str, bool]:
    signup = _app_state().signup
    return {"visible": signup.visible, "pending": signup.pending}


@app.post("/signup-prompt/dismiss")
async def dismiss_signup_prompt() -> dict[str, bool]:
    signup = _app_state().signup
    signup.dismiss()
    return {"visible": signup.visible, "pending": signup.pending}
