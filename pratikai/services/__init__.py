"""Conversation services and external integrations."""

from pratikai.services.conversation import ConversationService, Exchange
from pratikai.services.generator import ConversationGenerator, GeneratedReply, HistoryTurn
from pratikai.services.identity import Identity, IdentityResolver, build_identity_resolver
from pratikai.services.personas import Persona, resolve_persona, system_instruction
from pratikai.services.pricing import price_for

__all__ = [
    "ConversationService",
    "Exchange",
    "ConversationGenerator",
    "GeneratedReply",
    "HistoryTurn",
    "Identity",
    "IdentityResolver",
    "build_identity_resolver",
    "Persona",
    "resolve_persona",
    "system_instruction",
    "price_for",
]
