"""
Unit tests for the process-wide LLM gateway.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

import buddy.llm
from config import Settings


@pytest.fixture
def fresh_gateway(monkeypatch):
    """Start without a shared gateway and close whatever the test creates."""
    monkeypatch.setattr(buddy.llm, "_gateway", None)
    yield
    buddy.llm.close_llm_gateway()


def test_timeout_setting_reaches_gateway(fresh_gateway, monkeypatch):
    monkeypatch.setattr(buddy.llm, "get_settings", lambda: Settings(llm_timeout_seconds=7.5))

    gateway = buddy.llm.get_llm_gateway()

    assert gateway.timeout_seconds == 7.5
    assert gateway.client.timeout.read == 7.5
    assert gateway.client.timeout.connect == 7.5


def test_same_gateway_returned(fresh_gateway):
    assert buddy.llm.get_llm_gateway() is buddy.llm.get_llm_gateway()


def test_concurrent_first_calls_build_one_gateway(fresh_gateway, monkeypatch):
    built = []
    real_gateway = buddy.llm.LLMGateway
    lock = threading.Lock()

    def slow_gateway(**kwargs):
        time.sleep(0.05)
        gateway = real_gateway(**kwargs)
        with lock:
            built.append(gateway)
        return gateway

    monkeypatch.setattr(buddy.llm, "LLMGateway", slow_gateway)

    with ThreadPoolExecutor(max_workers=8) as pool:
        gateways = list(pool.map(lambda _: buddy.llm.get_llm_gateway(), range(8)))

    assert len(built) == 1
    assert all(g is built[0] for g in gateways)


def test_close_resets_shared_gateway(fresh_gateway):
    first = buddy.llm.get_llm_gateway()
    buddy.llm.close_llm_gateway()

    assert buddy.llm._gateway is None
    assert buddy.llm.get_llm_gateway() is not first
