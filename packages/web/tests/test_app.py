"""End-to-end flow through the wired application.

Uses the in-memory identity provider, so sign-up, verification and login run
against real AuthState/view code with no HTTP involved.
"""

from __future__ import annotations

from bookshelf_auth.state import get_auth_state
from bookshelf_catalog.client import get_catalog_client
from bookshelf_identity.local import LocalIdentityProvider
from bookshelf_web.app import create_app
from bookshelf_web.signup import MSG_ACCOUNT_EXISTS, FlowStep

EMAIL = "new.reader@example.com"
PASSWORD = "Secret123"


async def test_wires_shared_singletons(settings) -> None:
    app = create_app(settings, identity=LocalIdentityProvider())

    assert get_auth_state() is app.auth
    assert get_catalog_client() is app.catalog
    assert app.auth.is_loading

    await app.start()

    assert not app.auth.is_loading
    assert not app.auth.is_authenticated
    await app.close()


async def test_signup_verify_login(settings) -> None:
    identity = LocalIdentityProvider()
    app = create_app(settings, identity=identity)
    await app.start()

    signup = app.signup_view()
    signup.draft.name = "New Reader"
    signup.draft.email = EMAIL
    signup.draft.password = PASSWORD
    signup.draft.confirm_password = PASSWORD
    await signup.submit_signup()
    assert signup.step is FlowStep.VERIFICATION

    signup.draft.verification_code = identity.sent_codes[EMAIL]
    await signup.submit_verification()
    assert app.navigator.location == "/login"
    assert not app.auth.is_authenticated

    login = app.login_view()
    login.email = EMAIL
    login.password = PASSWORD
    await login.submit()

    assert app.auth.is_authenticated
    assert app.auth.user.email == EMAIL
    assert app.navigator.location == "/"

    await app.auth.logout()
    assert app.auth.user is None
    await app.close()


async def test_abandoned_signup_recovers(settings) -> None:
    identity = LocalIdentityProvider()
    await identity.sign_up(EMAIL, PASSWORD, {"email": EMAIL, "name": "New Reader"})
    identity.sent_codes[EMAIL] = "abandoned"
    app = create_app(settings, identity=identity)

    signup = app.signup_view()
    signup.draft.name = "New Reader"
    signup.draft.email = EMAIL
    signup.draft.password = PASSWORD
    signup.draft.confirm_password = PASSWORD
    await signup.submit_signup()

    assert signup.step is FlowStep.VERIFICATION
    assert signup.errors == {"email": MSG_ACCOUNT_EXISTS}
    assert signup.resend_status is not None
    assert signup.resend_status.kind == "success"
    assert identity.sent_codes[EMAIL] != "abandoned"
    assert app.errors.notifications == []

    signup.draft.verification_code = identity.sent_codes[EMAIL]
    await signup.submit_verification()
    assert app.navigator.location == "/login"
    await app.close()


async def test_bad_code_reports_error(settings) -> None:
    identity = LocalIdentityProvider()
    app = create_app(settings, identity=identity)

    signup = app.signup_view()
    signup.draft.name = "New Reader"
    signup.draft.email = EMAIL
    signup.draft.password = PASSWORD
    signup.draft.confirm_password = PASSWORD
    await signup.submit_signup()

    signup.draft.verification_code = "not-a-code"
    await signup.submit_verification()

    assert signup.errors == {"code": "Invalid verification code"}
    assert app.errors.notifications == ["Invalid verification code provided, please try again."]
    assert app.navigator.location == "/"
    await app.close()
