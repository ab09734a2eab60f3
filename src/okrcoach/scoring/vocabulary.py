"""Keyword lists used by the scoring rules."""

ACTIVITY_KEYWORDS = (
    'implement', 'launch', 'complete', 'deliver', 'build', 'create',
    'develop', 'deploy', 'install', 'setup', 'configure', 'write',
    'design', 'plan', 'organize', 'manage', 'coordinate', 'execute',
)

OUTCOME_KEYWORDS = (
    'increase', 'decrease', 'improve', 'reduce', 'enhance', 'optimize',
    'achieve', 'reach', 'attain', 'realize', 'transform', 'enable',
    'accelerate', 'maximize', 'minimize', 'strengthen', 'expand',
    'establish', 'become', 'drive', 'deliver', 'generate',
)

INSPIRATION_KEYWORDS = (
    'delight', 'transform', 'revolutionize', 'excel', 'breakthrough',
    'exceptional', 'outstanding', 'remarkable', 'extraordinary', 'amazing',
    'incredible', 'fantastic', 'brilliant', 'innovative', 'pioneering',
)

VAGUE_WORDS = (
    'better', 'good', 'more', 'less', 'some', 'many', 'few',
    'various', 'several', 'multiple', 'different', 'appropriate',
    'best', 'worst', 'great', 'excellent', 'world', 'everyone', 'everything',
)

STOP_WORDS = frozenset(
    ['the', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by', 'an', 'a']
)

INDUSTRY_KEYWORDS = {
    'technology': ('user', 'customer', 'product', 'innovation', 'digital', 'platform', 'performance'),
    'healthcare': ('patient', 'care', 'quality', 'safety', 'outcome', 'treatment', 'health'),
    'finance': ('customer', 'risk', 'compliance', 'revenue', 'profit', 'investment', 'return'),
    'retail': ('customer', 'sales', 'experience', 'inventory', 'margin', 'loyalty', 'satisfaction'),
    'manufacturing': ('quality', 'efficiency', 'cost', 'safety', 'productivity', 'waste', 'delivery'),
}

FUNCTION_KEYWORDS = {
    'engineering': ('performance', 'quality', 'reliability', 'scalability', 'efficiency', 'automation'),
    'sales': ('revenue', 'pipeline', 'conversion', 'customer', 'growth', 'acquisition'),
    'marketing': ('awareness', 'engagement', 'conversion', 'brand', 'reach', 'acquisition'),
    'operations': ('efficiency', 'cost', 'quality', 'process', 'productivity', 'satisfaction'),
    'hr': ('retention', 'satisfaction', 'engagement', 'performance', 'culture', 'development'),
}

# Business terms that look like jargon but are fine in an objective.
ALLOWED_LONG_TERMS = (
    'sustainability', 'certification', 'transformation', 'optimization',
    'implementation', 'personalized', 'satisfaction', 'infrastructure',
    'architecture', 'competitive', 'operational',
)


def industry_keywords(industry) -> tuple:
    return INDUSTRY_KEYWORDS.get(str(industry).lower(), ()) if industry else ()


def function_keywords(function) -> tuple:
    return FUNCTION_KEYWORDS.get(str(function).lower(), ()) if function else ()
