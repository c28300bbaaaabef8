"""Pytest configuration and fixtures."""

import os
import threading

import pytest
from injector import Injector

from uiforge.core import PromptSanitizer, Settings
from uiforge.core.container import CoreModule
from uiforge.agents import CodeGenerator, Explainer, Planner, ResilientInvoker
from uiforge.handlers import AgentHandler
from uiforge.models import CompletionOptions, CompletionProvider
from uiforge.storage import VersionStore
from uiforge.whitelist import CodeValidator


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["UIFORGE_LOG_LEVEL"] = "DEBUG"
    os.environ["UIFORGE_PROVIDER"] = "openai"
    os.environ["UIFORGE_OPENAI_BASE_URL"] = "https://llm.test/v1"


# ============================================================================
# Sample model output
# ============================================================================

SAMPLE_PLAN_JSON = """{
  "layout": {"type": "navbar-content", "description": "Navbar above a counter card"},
  "components": [
    {"component": "Navbar", "props": {"brand": "Acme"}, "wrapper": null, "children": []},
    {
      "component": "Card",
      "props": {"title": "Counter"},
      "wrapper": "ui-p-md",
      "children": [{"component": "Button", "props": {"variant": "primary"}}]
    }
  ],
  "reasoning": "A navbar for context and a single card holding the counter."
}"""

SAMPLE_CODE = """import React, { useState } from 'react';
import { Navbar, Card, Button } from './components/ui';

function GeneratedUI() {
  const [count, setCount] = useState(0);
  return (
    <div className="ui-container ui-p-md">
      <Navbar brand="Acme" links={[{ label: 'Home', active: true }]} />
      <Card title="Counter">
        <Button variant="primary" onClick={() => setCount(count + 1)}>Clicked {count}</Button>
      </Card>
    </div>
  );
}

export default GeneratedUI;"""

MODIFIED_CODE = SAMPLE_CODE.replace('brand="Acme"', 'brand="Acme Corp"')

SAMPLE_EXPLANATION = "A navbar sits above a card with a counter button."
MODIFY_EXPLANATION = "Renamed the navbar brand to Acme Corp."


# ============================================================================
# Fake provider
# ============================================================================

class ScriptedProvider(CompletionProvider):
    """
    Returns queued responses in order and records every prompt.

    A queued exception instance is raised instead of returned.
    """

    name = "scripted"

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.prompts = []
        self.closed = False
        self._lock = threading.Lock()

    def queue(self, *responses):
        with self._lock:
            self.responses.extend(responses)

    def complete(self, prompt, options=None):
        with self._lock:
            self.prompts.append(prompt)
            if not self.responses:
                raise AssertionError("ScriptedProvider ran out of responses")
            response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def close(self):
        self.closed = True

    @property
    def calls(self):
        return len(self.prompts)


def generate_script():
    """Responses for one successful generate run: plan, code, explanation."""
    return [SAMPLE_PLAN_JSON, f"```tsx\n{SAMPLE_CODE}\n```", SAMPLE_EXPLANATION]


def modify_script(code=MODIFIED_CODE):
    """Responses for one successful modify run: code, explanation."""
    return [code, MODIFY_EXPLANATION]


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return Settings(provider="openai", openai_api_key="test-key", backoff_base_seconds=0.0)


@pytest.fixture
def provider():
    """Scripted completion provider."""
    return ScriptedProvider()


@pytest.fixture
def sleeps():
    """Delays requested by the invoker."""
    return []


@pytest.fixture
def invoker(sleeps):
    """Invoker that records backoff delays instead of sleeping."""
    return ResilientInvoker(max_attempts=3, backoff_base=5.0, sleep=sleeps.append)


@pytest.fixture
def store():
    """Empty version store."""
    return VersionStore()


@pytest.fixture
def options():
    return CompletionOptions()


# ============================================================================
# Pipeline Fixtures
# ============================================================================

@pytest.fixture
def planner(provider, invoker, options):
    return Planner(provider, invoker, options)


@pytest.fixture
def generator(provider, invoker, options):
    return CodeGenerator(provider, invoker, options)


@pytest.fixture
def explainer(provider, invoker, options):
    return Explainer(provider, invoker, options)


@pytest.fixture
def agent_handler(provider, invoker, store, planner, generator, explainer):
    """Pipeline handler wired to the scripted provider."""
    return AgentHandler(
        sanitizer=PromptSanitizer(),
        planner=planner,
        generator=generator,
        validator=CodeValidator(),
        explainer=explainer,
        store=store,
    )


@pytest.fixture
def di_container(settings, provider, invoker):
    """Dependency injection container with the provider replaced."""

    def overrides(binder):
        binder.bind(CompletionProvider, to=provider)
        binder.bind(ResilientInvoker, to=invoker)

    return Injector([CoreModule(settings), overrides])
