import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from .config import configure_logging, get_settings
from .routers import events, index, links, posts, registration

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=f"{settings.site_name} Site API",
    version="1.0.0",
    description="Events, registrations, calendar export and news feed",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Carries flash attributes across the redirect after registering
app.add_middleware(SessionMiddleware, secret_key=settings.session_secret)

# Include routers; posts last, its post route matches any four segments
app.include_router(index.router)
app.include_router(events.router)
app.include_router(links.router)
app.include_router(registration.router)
app.include_router(posts.router)


@app.get("/health")
def health():
    return {"message": f"{settings.site_name} Site API", "status": "running"}


def run():
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
