"""
OIDC Playground Server.
Builds authorization requests, proxies token/introspect/userinfo calls to the provider,
decodes JWTs and publishes the request object signing key. Port 8080.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from playground_server.authorize import router as authorize_router
from playground_server.config import CORS_ORIGINS, LOG_LEVEL
from playground_server.errors import register_exception_handlers
from playground_server.jwt_decode import router as jwt_decode_router
from playground_server.keys import get_key_manager
from playground_server.pkce import router as pkce_router
from playground_server.token_proxy import router as token_router
from playground_server.well_known import router as well_known_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Generate the signing key on startup; a failure here stops the server."""
    get_key_manager()
    yield


app = FastAPI(title="OIDC Playground Server", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
register_exception_handlers(app)
app.include_router(pkce_router, tags=["pkce"])
app.include_router(authorize_router, tags=["authorize"])
app.include_router(token_router, tags=["token"])
app.include_router(jwt_decode_router, tags=["jwt"])
app.include_router(well_known_router, tags=["well-known"])


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "playground_server"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "playground_server.main:app",
        host="127.0.0.1",
        port=8080,
        log_level=LOG_LEVEL,
        reload=True,
    )
