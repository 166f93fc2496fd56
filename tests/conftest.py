import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_session_state(monkeypatch):
    """Give every test a clean global session without touching the environment."""
    for var in ("EARTHLORD_SUPABASE_URL", "EARTHLORD_SUPABASE_KEY",
                "EARTHLORD_ACCESS_TOKEN", "EARTHLORD_USER_ID"):
        monkeypatch.delenv(var, raising=False)

    from earthlord_scout.state import state, SessionState
    fresh = SessionState()
    for name in SessionState.model_fields:
        setattr(state, name, getattr(fresh, name))
    yield
