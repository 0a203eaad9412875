from __future__ import annotations

from moonland_pos.session_provider import InMemorySessionProvider, SessionUser


def test_subscribers_receive_transitions() -> None:
    provider = InMemorySessionProvider()
    seen: list[SessionUser | None] = []
    unsubscribe = provider.subscribe(seen.append)
    user = SessionUser(id="u1", username="alice", access_token="tok")

    provider.sign_in(user)
    provider.sign_out()
    provider.sign_out()
    unsubscribe()
    provider.sign_in(user)

    assert seen == [user, None]
    assert provider.current_user() == user


def test_unsubscribe_twice_is_harmless() -> None:
    provider = InMemorySessionProvider()
    unsubscribe = provider.subscribe(lambda _user: None)
    unsubscribe()
    unsubscribe()
