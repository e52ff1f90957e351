"""
Delta & Dispatch Engine.

Sends the submission delta through every resolved policy, strictly in
order. Redirects are held back until all other policies have run and are
only released when every one of them succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Sequence

import httpx

from ..kernel.types import ExecutionTarget, Field, Policy
from .context import FormContext
from .delta import Delta, build_patch, compute_delta, render_triples

logger = logging.getLogger(__name__)

PATCH_CONTENT_TYPE = "text/n3"


@dataclass
class PolicyResult:
    """Outcome of one policy. `success` is None for policies not dispatched."""

    policy: Policy
    success: bool | None
    status: int | None = None


@dataclass
class DispatchOutcome:
    """Aggregate result of a submission."""

    success: bool
    redirect_url: str | None = None
    results: list[PolicyResult] = dataclass_field(default_factory=list)


async def _send(ctx: FormContext, policy: Policy, body: str, content_type: str, method: str | None) -> PolicyResult:
    try:
        response = await ctx.transport.send(policy.url, body, content_type, method)
    except httpx.HTTPError as e:
        logger.error(f"Request to {policy.url} failed: {e}")
        return PolicyResult(policy=policy, success=False)

    if not response.is_success:
        logger.error(f"Request to {policy.url} failed with status {response.status_code}")
        return PolicyResult(policy=policy, success=False, status=response.status_code)

    logger.info(f"Submitted to {policy.url} ({response.status_code})")
    return PolicyResult(policy=policy, success=True, status=response.status_code)


async def dispatch_http_request(ctx: FormContext, policy: Policy, delta: Delta) -> PolicyResult:
    """Send the current-state triples with the policy's method and content type."""
    content_type = policy.content_type or ctx.default_content_type
    return await _send(ctx, policy, render_triples(delta.inserts), content_type, policy.method)


async def dispatch_patch(ctx: FormContext, policy: Policy, delta: Delta) -> PolicyResult:
    """Send an N3 insert/delete patch; the content type is always text/n3."""
    return await _send(ctx, policy, build_patch(delta), PATCH_CONTENT_TYPE, "PATCH")


async def dispatch(ctx: FormContext, policies: Sequence[Policy], delta: Delta) -> DispatchOutcome:
    """Apply `policies` in order and aggregate their outcomes."""
    results: list[PolicyResult] = []
    redirect: Policy | None = None

    for policy in policies:
        if policy.target is ExecutionTarget.HTTP_REQUEST:
            results.append(await dispatch_http_request(ctx, policy, delta))
        elif policy.target is ExecutionTarget.PATCH:
            results.append(await dispatch_patch(ctx, policy, delta))
        elif policy.target is ExecutionTarget.REDIRECT:
            if redirect is None:
                redirect = policy
            else:
                logger.warning(f"Ignoring additional redirect to {policy.url}")
            results.append(PolicyResult(policy=policy, success=None))
        else:
            logger.warning(f"Unknown execution target {policy.target_iri}")
            results.append(PolicyResult(policy=policy, success=None))

    success = all(r.success for r in results if r.success is not None)

    redirect_url = None
    if redirect is not None:
        if success:
            redirect_url = redirect.url
        else:
            logger.warning(f"Not redirecting to {redirect.url}: a submission failed")

    return DispatchOutcome(success=success, redirect_url=redirect_url, results=results)


async def submit(
    ctx: FormContext,
    policies: Sequence[Policy],
    fields: Sequence[Field],
    original: Sequence[Field],
    target_class: str | None,
    subject: str,
    form_iri: str,
) -> DispatchOutcome:
    """Compute the delta for `subject` and dispatch it through `policies`."""
    delta = compute_delta(fields, original, target_class, subject=subject, form_iri=form_iri)
    return await dispatch(ctx, policies, delta)
