"""Static display pages rendered server-side."""
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

pages_router = APIRouter(tags=["pages"])

SELLING_POINTS = [
    (
        "Super-Fast Delivery",
        "Get your groceries in as little as 2 hours, guaranteed within 24 hours.",
    ),
    (
        "Freshness First",
        "We source daily to ensure you receive only the freshest produce and products.",
    ),
    (
        "Global Variety",
        "Shop authentic groceries from India, America, China, Turkey, and more, all in one place.",
    ),
    (
        "Festival & Holiday Specials",
        "Unique selections for Diwali, Thanksgiving, Lunar New Year, Eid, "
        "and other global celebrations.",
    ),
    ("Secure Payments", "Multiple digital payment options, including OTC & EBT cards."),
    (
        "Trusted by Families",
        "Thousands of happy customers rely on BringIt for quality, speed, and service.",
    ),
]

ADMIN_FEATURES = [
    ("📊", "Sales Analytics"),
    ("💰", "Profit Tracking"),
    ("💲", "Price Management"),
    ("📦", "Order Management"),
    ("🛒", "Product Control"),
    ("👥", "User Management"),
]


@pages_router.get("/about", response_class=HTMLResponse)
async def about(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request, "about.html", {"selling_points": SELLING_POINTS}
    )


@pages_router.get("/admin-info", response_class=HTMLResponse)
async def admin_info(request: Request) -> HTMLResponse:
    """Admin panel access credentials and features."""
    settings = request.app.state.settings
    password = settings.admin_demo_password
    steps = [
        "Go to Login or Register page",
        "Use any admin email from the list above",
        f"Enter password: {password}",
        "You'll be automatically redirected to admin dashboard",
    ]
    return templates.TemplateResponse(
        request,
        "admin_info.html",
        {
            "admin_emails": settings.get_admin_emails_list(),
            "password": password,
            "features": ADMIN_FEATURES,
            "steps": steps,
        },
    )
