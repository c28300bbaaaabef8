"""Caller-facing request handlers."""

from .agent import AgentHandler, GenerateResult, ModifyResult

__all__ = ["AgentHandler", "GenerateResult", "ModifyResult"]
