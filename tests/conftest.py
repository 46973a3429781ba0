"""
Shared fixtures: an app wired to a throwaway SQLite database and upload
directory, plus an httpx client talking to it in-process.
"""

import httpx
import pytest
import pytest_asyncio

from config.settings import Settings
from database.session import init_models
from main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n%test resume\n"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'accounts.db'}",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await init_models(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def client_payload() -> dict:
    return {
        "name": "Ada Client",
        "email": "Ada@Example.com",
        "password": "s3cret-pass",
        "businessName": "Ada Ltd",
        "businessType": "Consulting",
        "companySize": "1-10",
        "address": "1 Main St",
    }


@pytest.fixture
def freelancer_form() -> dict:
    return {
        "name": "Finn Freelancer",
        "email": "finn@example.com",
        "password": "hunter22",
        "skills": "python, fastapi",
        "experience": "5 years",
    }


def _freelancer_files(picture=True, resume=True) -> dict:
    files = {}
    if picture:
        files["profilePicture"] = ("me.png", PNG_BYTES, "image/png")
    if resume:
        files["resume"] = ("cv.pdf", PDF_BYTES, "application/pdf")
    return files


@pytest.fixture
def freelancer_files():
    """Builder for the two registration attachments."""
    return _freelancer_files


@pytest.fixture
def bearer():
    return lambda token: {"Authorization": f"Bearer {token}"}
