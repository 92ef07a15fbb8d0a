from typing import Optional

import pytest
from fastapi import Depends, FastAPI, Request, Response
from fastapi.testclient import TestClient

from cookie_session.config import SessionOptions
from cookie_session.errors import ConfigurationError
from cookie_session.middleware import (
    RequestBinding,
    get_session,
    get_session_binding,
    install_cookie_session,
)
from cookie_session.session import Session, deserialize, serialize
from cookie_session.transport import Keygrip

KEYS = ['test-key']


def _make_app(**options) -> FastAPI:
    app = FastAPI()
    install_cookie_session(app, SessionOptions(**{'keys': KEYS, **options}))

    @app.get('/noop')
    def noop():
        return {'ok': True}

    @app.get('/peek')
    def peek(sess: Optional[Session] = Depends(get_session)):
        return {'data': sess.to_dict(), 'is_new': sess.is_new}

    @app.get('/login/{user}')
    def login(user: str, sess: Session = Depends(get_session)):
        sess['user'] = user
        return {'ok': True}

    @app.get('/count')
    def count(sess: Session = Depends(get_session)):
        sess['n'] = sess.get('n', 0) + 1
        return {'n': sess['n']}

    @app.get('/empty')
    def empty(sess: Session = Depends(get_session)):
        sess.clear()
        return {'ok': True}

    @app.get('/logout')
    def logout(binding: RequestBinding = Depends(get_session_binding)):
        binding.set_session(None)
        return {'ok': True}

    @app.get('/remember')
    def remember(binding: RequestBinding = Depends(get_session_binding)):
        binding.options['max_age'] = 3600
        binding.get_session()['remember'] = True
        return {'ok': True}

    @app.get('/own-cookie')
    def own_cookie(response: Response, sess: Session = Depends(get_session)):
        response.set_cookie('session', 'handler-value')
        sess['x'] = 1
        return {'ok': True}

    return app


def _set_cookies(resp) -> list[str]:
    return resp.headers.get_list('set-cookie')


def test_untouched_session_sets_no_cookie():
    client = TestClient(_make_app())
    r = client.get('/noop')
    assert r.status_code == 200
    assert _set_cookies(r) == []


def test_new_empty_session_sets_no_cookie():
    client = TestClient(_make_app())
    r = client.get('/peek')
    assert r.json() == {'data': {}, 'is_new': True}
    assert _set_cookies(r) == []


def test_populated_session_round_trips():
    client = TestClient(_make_app())
    r = client.get('/login/ann')
    cookies = _set_cookies(r)
    assert len(cookies) == 2
    assert cookies[0].startswith('session=')
    assert cookies[1].startswith('session.sig=')
    assert 'httponly' in cookies[0].lower()

    r = client.get('/peek')
    assert r.json() == {'data': {'user': 'ann'}, 'is_new': False}
    # unchanged session is not re-sent
    assert _set_cookies(r) == []


def test_counter_updates_cookie_each_request():
    client = TestClient(_make_app())
    assert client.get('/count').json() == {'n': 1}
    assert client.get('/count').json() == {'n': 2}
    r = client.get('/count')
    assert r.json() == {'n': 3}
    value = client.cookies.get('session')
    assert deserialize(value) == {'n': 3}


def test_logout_deletes_cookie():
    client = TestClient(_make_app())
    client.get('/login/ann')
    r = client.get('/logout')
    cookies = _set_cookies(r)
    assert len(cookies) == 2
    assert all('max-age=0' in c.lower() for c in cookies)
    assert client.cookies.get('session') is None
    assert client.get('/peek').json()['is_new'] is True


def test_emptied_session_is_saved_not_deleted():
    client = TestClient(_make_app())
    client.get('/login/ann')
    r = client.get('/empty')
    cookies = _set_cookies(r)
    assert len(cookies) == 2
    assert 'max-age=0' not in cookies[0].lower()
    assert deserialize(client.cookies.get('session')) == {}


def test_tampered_cookie_is_ignored():
    client = TestClient(_make_app())
    client.get('/login/ann')
    sig = client.cookies.get('session.sig')
    client.cookies.clear()
    client.cookies.set('session', serialize({'user': 'admin'}))
    client.cookies.set('session.sig', sig)
    r = client.get('/peek')
    assert r.json() == {'data': {}, 'is_new': True}


def test_malformed_cookie_self_heals():
    client = TestClient(_make_app(signed=False))
    client.cookies.set('session', 'garbage!!')
    r = client.get('/peek')
    assert r.status_code == 200
    assert r.json() == {'data': {}, 'is_new': True}


def test_unsigned_cookie_has_no_signature():
    client = TestClient(_make_app(signed=False))
    r = client.get('/login/bob')
    cookies = _set_cookies(r)
    assert len(cookies) == 1
    assert cookies[0].startswith('session=')


def test_rotated_key_is_accepted_and_resigned():
    value = serialize({'user': 'ann'})
    old_sig = Keygrip(['old-key']).sign(f'session={value}')
    client = TestClient(_make_app(keys=['new-key', 'old-key']))
    client.cookies.set('session', value)
    client.cookies.set('session.sig', old_sig)
    r = client.get('/peek')
    assert r.json() == {'data': {'user': 'ann'}, 'is_new': False}
    cookies = _set_cookies(r)
    assert len(cookies) == 1
    assert cookies[0].startswith('session.sig=' + Keygrip(['new-key']).sign(f'session={value}'))


def test_custom_cookie_name_and_attributes():
    client = TestClient(_make_app(name='sid', max_age=120, samesite='strict', secure=True))
    r = client.get('/login/ann')
    first = _set_cookies(r)[0]
    assert first.startswith('sid=')
    assert 'Max-Age=120' in first
    assert 'SameSite=strict' in first
    assert 'Secure' in first


def test_per_request_option_change():
    client = TestClient(_make_app())
    r = client.get('/remember')
    assert 'Max-Age=3600' in _set_cookies(r)[0]


def test_overwrite_replaces_handler_cookie():
    client = TestClient(_make_app())
    r = client.get('/own-cookie')
    session_cookies = [c for c in _set_cookies(r) if c.startswith('session=')]
    assert len(session_cookies) == 1
    assert 'handler-value' not in session_cookies[0]


def test_handler_cookie_kept_without_overwrite():
    client = TestClient(_make_app(overwrite=False))
    r = client.get('/own-cookie')
    session_cookies = [c for c in _set_cookies(r) if c.startswith('session=')]
    assert len(session_cookies) == 2


def test_missing_keys_fail_at_install():
    app = FastAPI()
    with pytest.raises(ConfigurationError):
        install_cookie_session(app, signed=True)


def test_binding_without_middleware_is_500():
    app = FastAPI()

    @app.get('/peek')
    def peek(sess=Depends(get_session)):
        return {}

    client = TestClient(app)
    assert client.get('/peek').status_code == 500


def test_lifespan_scope_passes_through():
    app = _make_app()
    with TestClient(app) as client:
        assert client.get('/noop').status_code == 200


def test_deeply_nested_cookie_self_heals():
    import base64
    deep = base64.b64encode(('{"a":' + '[' * 100000 + ']' * 100000 + '}').encode('ascii')).decode('ascii')
    client = TestClient(_make_app(signed=False))
    client.cookies.set('session', deep)
    r = client.get('/peek')
    assert r.status_code == 200
    assert r.json() == {'data': {}, 'is_new': True}
