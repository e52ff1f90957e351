"""
Shared fakes for form-cli tests.

Prompts, reasoner and prefix lookups are scripted; HTTP goes through
httpx.MockTransport; queries run on the real rdflib engine.
"""
import random
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

import httpx
import pytest

from form_cli.core.context import FormContext
from form_cli.shell.documents import RdfQueryEngine
from form_cli.shell.http import HttpTransport
from form_cli.shell.prompts import Choice


class ScriptedPrompter:
    """
    Answers prompts from a fixed script.

    For `choose`, an answer is matched against the offered values first and
    then against the titles; answering with something not offered fails.
    """

    def __init__(self, answers: list[Any] | None = None):
        self.answers = list(answers or [])
        self.calls: list[tuple[str, str, list[Choice] | None]] = []

    def _next(self, kind: str, message: str, choices=None) -> Any:
        self.calls.append((kind, message, list(choices) if choices is not None else None))
        assert self.answers, f"Unexpected {kind} prompt: {message}"
        return self.answers.pop(0)

    def offered(self, index: int = -1) -> list[Any]:
        """Values offered by a recorded choose prompt."""
        choose_calls = [c for c in self.calls if c[0] == "choose"]
        return [choice.value for choice in choose_calls[index][2]]

    async def choose(self, message: str, choices: Sequence[Choice]) -> Any:
        answer = self._next("choose", message, choices)
        for choice in choices:
            if choice.value is answer or choice.value == answer:
                return choice.value
        for choice in choices:
            if choice.title == answer:
                return choice.value
        raise AssertionError(f"{answer!r} not offered in {[c.title for c in choices]}")

    async def text(self, message: str, multiline: bool = False) -> str:
        return self._next("text", message)

    async def confirm(self, message: str, default: bool = True) -> bool:
        return self._next("confirm", message)

    async def date(self, message: str) -> datetime:
        return self._next("date", message)


class RandomPrompter:
    """Picks any offered choice at random; other prompts get fixed answers."""

    def __init__(self, seed: int):
        self.rng = random.Random(seed)

    async def choose(self, message: str, choices: Sequence[Choice]) -> Any:
        return self.rng.choice(list(choices)).value

    async def text(self, message: str, multiline: bool = False) -> str:
        return "text"

    async def confirm(self, message: str, default: bool = True) -> bool:
        return self.rng.random() < 0.5

    async def date(self, message: str) -> datetime:
        return datetime(2024, 5, 1, tzinfo=timezone.utc)


class FakeReasoner:
    """Returns a canned derived graph and remembers what it was given."""

    def __init__(self, output: str = ""):
        self.output = output
        self.calls: list[tuple[str, str]] = []

    async def derive(self, facts: str, rules: str) -> str:
        self.calls.append((facts, rules))
        return self.output


class FakePrefixes:
    def __init__(self, mapping: dict[str, str] | None = None):
        self.mapping = mapping or {}
        self.lookups: list[str] = []

    async def resolve(self, prefix: str) -> str | None:
        self.lookups.append(prefix)
        return self.mapping.get(prefix)


class RecordingHandler:
    """httpx.MockTransport handler answering from a route table."""

    def __init__(self, routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response] | httpx.Response] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url).split("#")[0])
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        return route


def make_transport(handler: RecordingHandler, default_method: str = "POST") -> HttpTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpTransport(default_method=default_method, client=client)


@pytest.fixture
def make_ctx():
    """Factory for a FormContext wired to fakes."""

    def _make(
        prompter=None,
        reasoner=None,
        handler: RecordingHandler | None = None,
        prefixes=None,
    ) -> FormContext:
        return FormContext(
            engine=RdfQueryEngine(),
            reasoner=reasoner or FakeReasoner(),
            prompter=prompter or ScriptedPrompter(),
            transport=make_transport(handler or RecordingHandler()),
            prefixes=prefixes or FakePrefixes(),
        )

    return _make


FORM_URL = "http://example.org/forms/person.n3#form"

PERSON_FORM = """
@prefix : <#> .
@prefix ui: <http://www.w3.org/ns/ui#> .
@prefix skos: <http://www.w3.org/2004/02/skos/core#> .
@prefix schema: <http://schema.org/> .

:form a ui:Form ;
  ui:property schema:Person ;
  ui:parts ( :notes :name :colour :agree :birth :mystery ) .

:name a ui:SingleLineTextField ;
  ui:property schema:name ;
  ui:label "Name" ;
  ui:required true ;
  ui:sequence 1 .

:birth a ui:DateField ;
  ui:property schema:birthDate ;
  ui:label "Birth date" ;
  ui:sequence 2 .

:colour a ui:Choice ;
  ui:property schema:color ;
  ui:label "Favourite colour" ;
  ui:from :Colour ;
  ui:multiple true ;
  ui:sequence 3 .

:agree a ui:BooleanField ;
  ui:property schema:agree ;
  ui:label "Agree" ;
  ui:sequence 4 .

:notes a ui:MultiLineTextField ;
  ui:property schema:description ;
  ui:label "Notes" ;
  ui:sequence 5 .

:mystery a ui:ColorPicker ;
  ui:property schema:hue ;
  ui:sequence 6 .

:red a :Colour ; skos:prefLabel "Red" .
:green a :Colour ; skos:prefLabel "Green" .
"""

DATA_URL = "http://example.org/people.n3"

PERSON_DATA = """
@prefix schema: <http://schema.org/> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .

<http://example.org/people#alice> a schema:Person ;
  schema:name "Alice" ;
  schema:birthDate "1990-04-02"^^xsd:date .

<http://example.org/people#bob> a schema:Person ;
  schema:name "Bob" .

<http://example.org/people#rex> a schema:Dog ;
  schema:name "Rex" .
"""

DERIVED_POLICIES = """
@prefix ex: <http://example.org/> .
@prefix fno: <https://w3id.org/function/ontology#> .
@prefix http: <http://www.w3.org/2011/http#> .
@prefix pol: <https://www.example.org/ns/policy#> .

ex:HttpPolicy pol:policy ex:httpExecution .
ex:httpExecution a fno:Execution ;
  fno:executes ex:httpRequest ;
  http:requestURI <http://example.org/inbox> ;
  http:methodName "PUT" ;
  http:headers (
    [ http:fieldName "Accept" ; http:fieldValue "text/plain" ]
    [ http:fieldName "Content-Type" ; http:fieldValue "text/turtle" ]
  ) .

ex:RedirectPolicy pol:policy ex:redirectExecution .
ex:redirectExecution a fno:Execution ;
  fno:executes ex:redirect ;
  http:requestURI <http://example.org/thanks> .
"""
