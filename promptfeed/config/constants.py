"""Keyword tables, curated datasets and enumerations."""

from enum import Enum


class Sentiment(str, Enum):
    """Directional tone of a signal."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class IdeaKind(str, Enum):
    """Kinds of generated ideas."""

    AI_AGENT = "AI Agent"
    REAL_PROJECT = "Real Project"


# Chains polled for freshly created pairs
DEX_CHAINS = ["solana", "ethereum", "base"]

# Search terms for the social narrative scrape
CRYPTO_KEYWORDS = [
    "AI agent",
    "AI agent crypto",
    "Axiom",
    "memecoin",
    "solana",
    "$SOL",
    "crypto",
    "degen",
    "pump",
    "trending crypto",
]

BULLISH_WORDS = [
    "moon", "pump", "bullish", "gem", "buy", "long", "ape",
    "🚀", "🔥", "send it", "wagmi", "gm",
]
BEARISH_WORDS = [
    "dump", "bearish", "sell", "short", "rug", "scam",
    "crash", "rekt", "ngmi",
]

# Narrative velocity keywords
AI_KEYWORDS = [
    "ai agent", "axiom", "autonomous", "on-chain ai",
    "ai16z", "virtual", "ai bot", "agent swarm",
]

# Headline filter for the agent-trend scrape
AI_HEADLINE_TERMS = ["ai", "agent", "autonomous", "bot"]
HEADLINE_SELECTORS = "h2, h3, .post-card-info-title, .post__title"

AI_AGENT_TOKENS = [
    "AI16Z", "VIRTUAL", "FET", "AGIX", "OCEAN",
    "TAO", "RNDR", "AKT", "AIOZ", "PRIME",
]

SEED_NARRATIVES = [
    "Autonomous AI trading agents",
    "AI chatbots influencing markets",
    "AI-powered DAO and DeFi",
    "AI virtual environments",
    "Decentralized Science + AI",
    "Multi-agent coordination",
]

# Live complaint searches (only the first two are polled per run)
COMPLAINT_QUERIES = [
    "crypto problem", "defi issue", "solana bug", "ethereum expensive",
    "wallet lost", "rug pull", "scam crypto", "gas fees",
]

PROBLEM_KEYWORDS = [
    "can't", "cannot", "problem", "issue", "bug", "broken", "doesn't work",
    "frustrated", "annoying", "hate", "lost", "scam", "stuck", "help",
    "impossible", "difficult", "confusing", "expensive", "slow", "failed",
    "need", "wish", "should", "why isn't", "why can't", "how do i",
]

# Category -> trigger words, checked in order
PROBLEM_CATEGORY_RULES = [
    ("security", ("rug", "scam", "lost")),
    ("trading", ("trade", "swap", "slippage")),
    ("portfolio", ("wallet", "portfolio")),
    ("infrastructure", ("gas", "fee")),
    ("defi", ("defi", "yield", "lp")),
]

FREQUENCY_WEIGHTS = {"high": 3, "medium": 2, "low": 1}

# Pain points compiled from community discussions
CURATED_PROBLEMS = [
    {
        "problem": "Users lose funds to rug pulls because they can't verify contract safety before buying",
        "source": "twitter",
        "category": "security",
        "frequency": "high",
        "sentiment": "frustrated",
    },
    {
        "problem": "No reliable way to check if a token deployer has rugged before",
        "source": "telegram",
        "category": "security",
        "frequency": "high",
        "sentiment": "frustrated",
    },
    {
        "problem": "Users don't know which token approvals to revoke to protect their wallets",
        "source": "reddit",
        "category": "security",
        "frequency": "medium",
        "sentiment": "confused",
    },
    {
        "problem": "By the time users find a trending token, it has already pumped too much to enter",
        "source": "telegram",
        "category": "trading",
        "frequency": "high",
        "sentiment": "frustrated",
    },
    {
        "problem": "Sniper bots front-run user trades and steal profits on every buy",
        "source": "twitter",
        "category": "trading",
        "frequency": "high",
        "sentiment": "angry",
    },
    {
        "problem": "Gas prices spike unexpectedly and users overpay for simple transactions",
        "source": "twitter",
        "category": "trading",
        "frequency": "medium",
        "sentiment": "frustrated",
    },
    {
        "problem": "Tracking holdings across 10+ wallets requires manual spreadsheet updates",
        "source": "reddit",
        "category": "portfolio",
        "frequency": "high",
        "sentiment": "overwhelmed",
    },
    {
        "problem": "Calculating crypto taxes at year end is a nightmare with hundreds of trades",
        "source": "twitter",
        "category": "portfolio",
        "frequency": "high",
        "sentiment": "stressed",
    },
    {
        "problem": "Alpha calls are scattered across 50+ Telegram groups and X accounts",
        "source": "telegram",
        "category": "discovery",
        "frequency": "high",
        "sentiment": "overwhelmed",
    },
    {
        "problem": "Impermanent loss calculators ignore fees, so LPs can't tell if a pool is worth it",
        "source": "reddit",
        "category": "defi",
        "frequency": "medium",
        "sentiment": "confused",
    },
    {
        "problem": "Airdrop eligibility rules are buried in threads and change without notice",
        "source": "twitter",
        "category": "community",
        "frequency": "medium",
        "sentiment": "annoyed",
    },
    {
        "problem": "Newcomers get wrecked on their first trades because there's nowhere safe to practice",
        "source": "reddit",
        "category": "onboarding",
        "frequency": "medium",
        "sentiment": "discouraged",
    },
    {
        "problem": "Building on Solana is hard because documentation is scattered and outdated",
        "source": "reddit",
        "category": "developer",
        "frequency": "medium",
        "sentiment": "frustrated",
    },
    {
        "problem": "Smart contract audits are too expensive for small projects, so they skip them",
        "source": "twitter",
        "category": "developer",
        "frequency": "low",
        "sentiment": "concerned",
    },
]

# Agent archetypes for AI agent ideas
AI_AGENT_TYPES = [
    {"name": "Sniper Bot", "category": "Trading", "focus": "Launch sniping"},
    {"name": "Wallet Tracker", "category": "Analytics", "focus": "Smart money tracking"},
    {"name": "Copy Trading Agent", "category": "Trading", "focus": "Automated copying"},
    {"name": "Alpha Scanner", "category": "Discovery", "focus": "Signal aggregation"},
    {"name": "Whale Alert Agent", "category": "Analytics", "focus": "Large tx monitoring"},
    {"name": "Rug Detection Agent", "category": "Security", "focus": "Contract analysis"},
    {"name": "Auto TP/SL Agent", "category": "Trading", "focus": "Profit automation"},
    {"name": "Social Buzz Agent", "category": "Discovery", "focus": "Sentiment tracking"},
    {"name": "Order Flow Agent", "category": "Analytics", "focus": "DEX flow analysis"},
    {"name": "Launch Monitor Agent", "category": "Discovery", "focus": "New pairs detection"},
]

# Category -> candidate project names for real project ideas
PROJECT_SOLUTIONS = {
    "security": ["Contract Auditor Platform", "Wallet Approval Manager", "Deployer History Checker"],
    "trading": ["Gas Fee Optimizer", "MEV Protection Tool", "Trading Journal Platform"],
    "portfolio": ["Multi-Wallet Tracker", "Crypto Tax Calculator", "Cross-Chain PnL Dashboard"],
    "discovery": ["Influencer Performance Tracker", "Alpha Source Aggregator", "Launch Gem Finder"],
    "analytics": ["Holder Concentration Analyzer", "Volume Pattern Scanner", "On-Chain Intelligence Dashboard"],
    "defi": ["IL Calculator with Fees", "Yield Reality Checker", "LP Position Manager"],
    "community": ["Airdrop Eligibility Tracker", "Holder Verification System", "Community Reward Platform"],
    "onboarding": ["Crypto Learning Platform", "Paper Trading Simulator", "Beginner Wallet Guide"],
    "developer": ["Solana Docs Copilot", "No-Code Token Launcher", "Audit Checklist Generator"],
    "infrastructure": ["Gas Fee Optimizer", "RPC Health Monitor", "Fee Estimator Widget"],
}

NAME_PREFIXES = ["Smart", "Alpha", "Degen", "Turbo", "Pro", "Ultra", "Rapid", "Auto"]

# Market score weights
SCORING_WEIGHTS = {
    "volume_growth": 0.25,  # volume spike in 1h
    "narrative_velocity": 0.35,  # AI/agent keyword frequency
    "liquidity_health": 0.40,  # MC / liquidity ratio
}
