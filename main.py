# main.py — Member accounts API

import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import build_gate, require_auth
from config import Settings, load_settings
from member_model import ChangePasswordRequest, RegisterRequest
from member_store import InMemoryMemberStore, MemberStore
from members import MemberError, MemberService, describe_errors

logger = logging.getLogger("member-api")


def get_service(request: Request) -> MemberService:
    return request.app.state.member_service


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


def _format_validation_error(exc: RequestValidationError) -> str:
    return describe_errors(exc.errors())


def attach_member_routes(app: FastAPI) -> None:
    """
    Gắn các route member vào app:
      - POST   /register
      - GET    /profile?email=
      - PUT    /profile?email=
      - DELETE /profile?email=
      - POST   /change-password
    """

    @app.post("/register")
    def register(req: RegisterRequest, service: MemberService = Depends(get_service)):
        member = service.register(req)
        return {"message": "Registration successful", "member": _dump(member)}

    @app.get("/profile")
    def view_profile(email: str = "", service: MemberService = Depends(get_service)):
        return _dump(service.view_profile(email))

    # body đọc thô: email phải tồn tại trước khi bind body (404 trước 400)
    @app.put("/profile")
    async def edit_profile(
        request: Request,
        email: str = "",
        service: MemberService = Depends(get_service),
    ):
        member = service.edit_profile(email, await request.body())
        return {"message": "Profile updated", "member": _dump(member)}

    @app.delete("/profile")
    def delete_profile(email: str = "", service: MemberService = Depends(get_service)):
        service.delete_profile(email)
        return {"message": "Member deleted successfully"}

    @app.post("/change-password")
    def change_password(req: ChangePasswordRequest, service: MemberService = Depends(get_service)):
        service.change_password(req)
        return {"message": "Password changed successfully"}

    @app.get("/health")
    def health(request: Request):
        return {"status": "ok", "members": len(request.app.state.member_store)}


def attach_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(MemberError)
    async def member_error_handler(request: Request, exc: MemberError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": _format_validation_error(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def create_app(settings: Optional[Settings] = None, store: Optional[MemberStore] = None) -> FastAPI:
    settings = settings or load_settings()
    store = store if store is not None else InMemoryMemberStore()

    app = FastAPI(
        title="Member Accounts API",
        dependencies=[Depends(require_auth)],
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.member_store = store
    app.state.auth_gate = build_gate(settings.api_key)
    app.state.member_service = MemberService(
        store,
        bcrypt_rounds=settings.bcrypt_rounds,
        expose_digest=settings.expose_digest,
    )

    attach_error_handlers(app)
    attach_member_routes(app)

    logger.info(
        "member api ready auth=%s bcrypt_rounds=%s expose_digest=%s",
        type(app.state.auth_gate).__name__,
        settings.bcrypt_rounds,
        settings.expose_digest,
    )
    return app


SETTINGS = load_settings()
logging.basicConfig(level=getattr(logging, SETTINGS.log_level, logging.INFO))

app = create_app(SETTINGS)


if __name__ == "__main__":
    uvicorn.run(app, host=SETTINGS.host, port=SETTINGS.port)
