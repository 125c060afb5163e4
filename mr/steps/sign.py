"""Code signing with the configured Developer ID identity."""

from __future__ import annotations

from dataclasses import dataclass

from mr.adapters.codesign import check_identity_in_keychain, run_codesign, run_verify
from mr.core.result import Err, Ok
from mr.pipeline.context import Context
from mr.pipeline.step import StepResult
from mr.steps._common import log_output, tool_failure
from mr.steps.validate import required_string


@dataclass(frozen=True, slots=True)
class SignCheck:
    name: str = "validating signing configuration"
    requires: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        checked = required_string(ctx.config.sign.identity, "sign.identity")
        if isinstance(checked, Err):
            return checked
        ctx.console.debug("Signing configuration validated")
        return Ok(None)


@dataclass(frozen=True, slots=True)
class SignStep:
    """Sign the bundle in place, then verify the signature.

    Hardened Runtime is enabled whenever the bundle is going to be notarized.
    """

    name: str = "signing application"
    requires: tuple[str, ...] = ("app_path",)
    provides: tuple[str, ...] = ()

    def execute(self, ctx: Context) -> StepResult:
        identity = ctx.config.sign.identity
        app_path = ctx.artifacts.app_path

        ctx.console.info(f"Validating signing identity: {identity}")
        found = check_identity_in_keychain(identity, cwd=ctx.workdir)
        if isinstance(found, Err):
            return tool_failure(ctx, found.error, "identity validation failed")

        hardened_runtime = not ctx.skip_notarize and ctx.config.notarize.configured
        if hardened_runtime:
            ctx.console.info("Hardened Runtime enabled (required for notarization)")

        ctx.console.info(f"Signing {app_path}")
        signed = run_codesign(identity, app_path, ctx.workdir, hardened_runtime=hardened_runtime)
        if isinstance(signed, Err):
            return tool_failure(ctx, signed.error, "signing failed")
        log_output(ctx, signed.value)

        ctx.console.info("Verifying signature")
        verified = run_verify(app_path, ctx.workdir)
        if isinstance(verified, Err):
            return tool_failure(ctx, verified.error)
        log_output(ctx, verified.value)

        ctx.console.success(f"Signed and verified: {app_path}")
        return Ok(None)
