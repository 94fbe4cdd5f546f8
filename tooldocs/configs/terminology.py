#!/usr/bin/env python3
"""
terminology.py
--------------
Vocabulary definitions for documentation consistency checks.

This module defines:
- DOMAIN_TERMS: Terms whose spelling/capitalization must not drift
- CANONICAL_SPELLINGS: Authoritative product spellings (always win)
- DISCOURAGED_TERMS: Words replaced by the style guide
- PREFERRED_PHRASES: Wordy phrases with a shorter preferred form
- BRANDING_RULES: Disallowed product-name substitutions (errors)

These definitions are used by:
- tooldocs/configs/rules.py as QualityRules defaults
- tooldocs/validators/consistency.py and format.py
"""
from __future__ import annotations

from typing import Dict, Tuple


# =============================================================================
# DOMAIN TERMS (tracked for capitalization / spelling drift)
# =============================================================================

DOMAIN_TERMS: Tuple[str, ...] = (
    "Azure MCP Server",
    "storage account",
    "resource group",
    "Key Vault",
    "Cosmos DB",
    "Log Analytics workspace",
    "managed identity",
    "App Configuration",
    "Service Bus",
    "Event Hubs",
    "AI Search",
    "blob container",
    "connection string",
    "access policy",
    "Azure Monitor",
    "Azure Load Testing",
    "Azure AI Foundry",
)

# Keyed by normalized term (lowercase, single spaces)
CANONICAL_SPELLINGS: Dict[str, str] = {
    "azure mcp server": "Azure MCP Server",
    "cosmos db": "Cosmos DB",
    "app configuration": "App Configuration",
    "service bus": "Service Bus",
    "event hubs": "Event Hubs",
    "azure monitor": "Azure Monitor",
    "azure load testing": "Azure Load Testing",
    "azure ai foundry": "Azure AI Foundry",
}


# =============================================================================
# STYLE GUIDE TERMS
# =============================================================================

# word -> replacement
DISCOURAGED_TERMS: Dict[str, str] = {
    "login": "sign in",
    "log-in": "sign in",
    "setup": "set up",
    "username": "user name",
    "backend": "back end",
    "frontend": "front end",
    "realtime": "real time",
    "data base": "database",
}

PREFERRED_PHRASES: Dict[str, str] = {
    "utilize": "use",
    "in order to": "to",
    "due to the fact that": "because",
}


# =============================================================================
# BRANDING
# =============================================================================

# (disallowed, replacement, case_sensitive)
BRANDING_RULES: Tuple[Tuple[str, str, bool], ...] = (
    ("Microsoft Azure", "Azure", False),
    ("Azure Cloud", "Azure", False),
    ("Azure Portal", "Azure portal", True),
    ("Azure Active Directory", "Microsoft Entra ID", False),
)
