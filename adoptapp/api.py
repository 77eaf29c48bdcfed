"""
HTTP API for AdoptApp.
Forwards parsed payloads to the managers and maps error kinds to status codes.
"""

from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from .config import settings
from .errors import AdoptionRequestError, ErrorKind, MalformedRequestError
from .schemas.pet_data import Adoption
from .schemas.user_profile import OperationResult, User
from .services import AdoptAppServices
from .utils.helpers import configure_logging
from .utils.validators import describe_validation_errors


STATUS_BY_KIND = {
    ErrorKind.MALFORMED_REQUEST: 400,
    ErrorKind.RULE_VIOLATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class AdoptionCompletion(BaseModel):
    """Body of a completed adoption request."""
    email: str
    pet_id: int


def create_app(services: Optional[AdoptAppServices] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Interactive docs are only served outside production.

    Args:
        services: Managers to expose; built from settings when omitted

    Returns:
        Configured FastAPI app
    """
    services = services or AdoptAppServices()
    request_manager = services.request_manager
    adoption_manager = services.adoption_manager

    production = services.config.is_production()
    app = FastAPI(
        title="AdoptApp",
        description="Pet adoption request manager",
        version="1.0.0",
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
        openapi_url=None if production else "/openapi.json",
    )

    @app.exception_handler(AdoptionRequestError)
    async def handle_adoption_error(request: Request, exc: AdoptionRequestError):
        status = STATUS_BY_KIND[exc.kind]
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({exc.kind.value}): {exc.message}")
        return JSONResponse(status_code=status, content={"status": status, **exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        problems = describe_validation_errors(exc.errors())
        return await handle_adoption_error(
            request,
            MalformedRequestError("Invalid request: " + "; ".join(problems), errors=problems),
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "adoptapp"}

    @app.post("/users", response_model=OperationResult)
    def submit_interest(payload: Dict[str, Any] = Body(...)):
        return request_manager.submit_interest(payload)

    @app.get("/users", response_model=List[User])
    def list_users():
        return request_manager.list_users()

    @app.get("/users/{user_id}", response_model=User)
    def get_user(user_id: int):
        return request_manager.get_user(user_id)

    @app.delete("/users/{email}", response_model=OperationResult)
    def delete_user(email: str):
        return request_manager.delete_user(email)

    @app.delete("/users/{email}/pets/{pet_id}", response_model=OperationResult)
    def withdraw_interest(email: str, pet_id: int):
        return request_manager.withdraw_interest(email, pet_id)

    @app.post("/adoptions", response_model=OperationResult)
    def complete_adoption(body: AdoptionCompletion):
        return adoption_manager.complete_adoption(body.email, body.pet_id)

    @app.get("/adoptions", response_model=List[Adoption])
    def list_adoptions():
        return adoption_manager.list_adoptions()

    return app


def main():
    """Run the API with uvicorn."""
    import uvicorn

    configure_logging()
    logger.info(f"Starting AdoptApp API ({settings.environment})")
    uvicorn.run(create_app(), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
