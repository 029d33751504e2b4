import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import settings
from app.database import Base, engine
from app.api import admin, auth, rating, session, skill, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="PeerTutor API", debug=settings.DEBUG)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router)     # /auth/*
app.include_router(users.router)    # /users/*
app.include_router(skill.router)    # /api/skills, /api/user/skills, /api/matches
app.include_router(session.router)  # /api/sessions/*
app.include_router(rating.router)   # /api/user/ratings/*, /api/top-teachers
app.include_router(admin.router)    # /api/admin/*

logger.info("PeerTutor API initialised (env=%s)", settings.APP_ENV)


@app.exception_handler(RequestValidationError)
async def session_validation_handler(request: Request, exc: RequestValidationError):
    # Session endpoints report every rejected body as 400
    if request.url.path.startswith("/api/sessions"):
        return JSONResponse(
            status_code=400,
            content={"detail": jsonable_encoder(exc.errors())},
        )
    return await request_validation_exception_handler(request, exc)


@app.get("/")
def root():
    return {"message": "PeerTutor API", "docs": "/docs"}


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "PeerTutor API is running",
        "version": "1.0.0",
    }


@app.get("/debug/routes")
def list_routes():
    """List all registered routes for debugging."""
    routes = []
    for route in app.routes:
        if hasattr(route, "methods"):
            routes.append({
                "path": route.path,
                "methods": list(route.methods),
                "name": route.name,
            })
    return {"routes": routes}
