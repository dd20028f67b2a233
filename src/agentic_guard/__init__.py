"""Agentic Guard - Rule of Two pre-execution hook for AI coding agents."""

__version__ = "0.1.0"

# Tool-call model
from agentic_guard.toolcall import (
    ToolCall,
    ToolKind,
    normalize,
    normalize_call,
)

# Capability detection and scoring
from agentic_guard.capabilities import (
    Capability,
    CapabilityFinding,
    detect_sensitive_access,
    detect_state_change,
    detect_untrusted_input,
)
from agentic_guard.risk_score import (
    RULE_OF_TWO_THRESHOLD,
    Analysis,
    RuleOfTwoScorer,
)

# Critical threats
from agentic_guard.threats import (
    detect_critical_threat,
    detect_critical_threat_call,
)

# Verdicts and decisions
from agentic_guard.types import (
    EXIT_ALLOW,
    EXIT_BLOCK,
    Decision,
    HookPayload,
    PermissionDecision,
    ThreatType,
    Verdict,
    VerdictKind,
)
from agentic_guard.renderer import render

# Configuration and errors
from agentic_guard.config import GuardConfig, Mode, detect_mode
from agentic_guard.errors import (
    ApprovalRequiredError,
    GuardBlockedError,
    PayloadError,
)

# Engine
from agentic_guard.engine import GuardEngine

__all__ = [
    "__version__",
    "ToolCall",
    "ToolKind",
    "normalize",
    "normalize_call",
    "Capability",
    "CapabilityFinding",
    "detect_untrusted_input",
    "detect_sensitive_access",
    "detect_state_change",
    "RULE_OF_TWO_THRESHOLD",
    "Analysis",
    "RuleOfTwoScorer",
    "detect_critical_threat",
    "detect_critical_threat_call",
    "EXIT_ALLOW",
    "EXIT_BLOCK",
    "Decision",
    "HookPayload",
    "PermissionDecision",
    "ThreatType",
    "Verdict",
    "VerdictKind",
    "render",
    "GuardConfig",
    "Mode",
    "detect_mode",
    "ApprovalRequiredError",
    "GuardBlockedError",
    "PayloadError",
    "GuardEngine",
]
