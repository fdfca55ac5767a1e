"""JSON schemas describing the structured responses the model is asked for."""

_CONFIDENCE = {
    "type": "string",
    "enum": ["HIGH", "MEDIUM", "LOW"],
    "description": "Confidence level in the recommendation",
}

_ALERT_LEVEL = {
    "type": "object",
    "properties": {
        "level": {"type": "number", "description": "Spot price that triggers the alert"},
        "description": {"type": "string"},
    },
    "required": ["level", "description"],
}

MARKET_VERDICT_SCHEMA = {
    "type": "object",
    "properties": {
        "verdict": {
            "type": "string",
            "enum": ["BULLISH", "BEARISH", "NEUTRAL"],
            "description": "Directional market verdict",
        },
        "confidence": _CONFIDENCE,
        "analysis": {
            "type": "object",
            "properties": {
                "trend": {"type": "string"},
                "momentum": {"type": "string"},
                "pcr": {"type": "number", "description": "Put-call ratio"},
                "pcrInterpretation": {"type": "string"},
                "maxPain": {"type": "number"},
                "keyLevels": {
                    "type": "object",
                    "properties": {
                        "support": {"type": "number"},
                        "resistance": {"type": "number"},
                    },
                },
            },
        },
        "strategy": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "type": {"type": "string", "enum": ["CREDIT", "DEBIT"]},
                "legs": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "action": {"type": "string", "enum": ["BUY", "SELL"]},
                            "strike": {"type": "number"},
                            "type": {"type": "string", "enum": ["CE", "PE"]},
                            "premium": {"type": "number"},
                        },
                    },
                },
                "netPremium": {"type": "number"},
                "maxProfit": {"type": "number"},
                "maxLoss": {"type": "number"},
                "riskReward": {"type": "string", "description": "Ratio like '1:2'"},
                "breakeven": {
                    "oneOf": [
                        {"type": "number"},
                        {"type": "array", "items": {"type": "number"}, "minItems": 2, "maxItems": 2},
                    ]
                },
                "rationale": {"type": "string"},
            },
        },
        "alerts": {
            "type": "object",
            "properties": {
                "warning": _ALERT_LEVEL,
                "abort": _ALERT_LEVEL,
                "profitBooking": _ALERT_LEVEL,
            },
        },
        "summary": {"type": "string", "description": "2-3 sentence executive summary"},
    },
    "required": ["verdict", "confidence", "analysis", "strategy", "alerts", "summary"],
}

ROUTINE_CHECK_SCHEMA = {
    "type": "object",
    "properties": {
        "recommendation": {"type": "string", "enum": ["HOLD", "EXIT", "ADJUST"]},
        "confidence": _CONFIDENCE,
        "currentStatus": {
            "type": "object",
            "properties": {
                "pnlPercent": {"type": "number"},
                "distanceToStop": {"type": "number"},
                "distanceToTarget": {"type": "number"},
                "thesisStatus": {"type": "string", "enum": ["INTACT", "WEAKENING", "INVALID"]},
            },
        },
        "analysis": {
            "type": "object",
            "properties": {
                "dayClose": {"type": "string"},
                "technicalView": {"type": "string"},
                "riskAssessment": {"type": "string"},
            },
        },
        "action": {
            "type": "object",
            "properties": {
                "instruction": {"type": "string"},
                "rationale": {"type": "string"},
                "newStopLoss": {"type": ["number", "null"]},
                "newTarget": {"type": ["number", "null"]},
            },
        },
        "overnightRisk": {"type": "string", "enum": ["LOW", "MEDIUM", "HIGH"]},
        "summary": {"type": "string"},
    },
    "required": ["recommendation", "confidence", "currentStatus", "action", "summary"],
}

QUICK_SENTIMENT_SCHEMA = {
    "type": "object",
    "properties": {
        "sentiment": {"type": "string", "enum": ["BULLISH", "BEARISH", "NEUTRAL"]},
        "summary": {"type": "string", "description": "One line description"},
    },
    "required": ["sentiment", "summary"],
}
