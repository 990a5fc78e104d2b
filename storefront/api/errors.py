from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from storefront.application.errors import StoreFrontError

_LOCATIONS = {"body", "query", "path", "header", "cookie"}

async def storefront_error_handler(request: Request, exc: StoreFrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        errors.append({"path": ".".join(str(part) for part in loc), "message": err.get("msg", "")})
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreFrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
