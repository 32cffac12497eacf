"""
Lead Assignment CRM API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__

# Create FastAPI application
app = FastAPI(
    title="Lead Assignment CRM API",
    description="REST API for lead intake, assignment, follow-ups and sales performance",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS - Allow all origins for development
# TODO: Restrict origins to the deployed frontend URL
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "lead-assignment-crm-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Lead Assignment CRM API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import appointments, dashboard, leads, roster, system

app.include_router(leads.router, prefix="/api/v1", tags=["Leads"])
app.include_router(roster.router, prefix="/api/v1", tags=["Roster"])
app.include_router(system.router, prefix="/api/v1", tags=["System"])
app.include_router(appointments.router, prefix="/api/v1", tags=["Appointments"])
app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])
