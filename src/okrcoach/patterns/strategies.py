"""Reframing strategies offered for each anti-pattern."""

from .models import ReframingExample, ReframingStrategy, Technique

FALLBACK_QUESTION = "Let's step back. What change or improvement will people see when this succeeds?"

FIVE_WHYS = ReframingStrategy(
    name="Five Whys Technique",
    technique=Technique.FIVE_WHYS,
    questions=(
        "That sounds like a project milestone! Let's explore what change {activity} will create "
        "for your users or customers.",
        "Why is {activity} important to your organization?",
        "What value will {activity} create once it's complete?",
        "How will people's experience change when {activity} is finished?",
        "What business outcome are you hoping to achieve through {activity}?",
    ),
    examples=(
        ReframingExample(
            before="Launch new mobile app",
            after="Delight customers with instant access to their account information",
            context="Technology",
            explanation="Shifted from the deliverable (app) to the customer outcome (instant access)",
        ),
        ReframingExample(
            before="Implement CRM system",
            after="Transform sales productivity by reducing admin time by 40%",
            context="Sales",
            explanation="Focused on the productivity outcome rather than the system implementation",
        ),
    ),
    success_criteria=(
        "User describes a change in state rather than a deliverable",
        "User mentions impact on people (customers, users, team)",
        "User connects to business value or strategic outcome",
    ),
    max_attempts=5,
)

OUTCOME_TRANSFORMATION = ReframingStrategy(
    name="Outcome Transformation",
    technique=Technique.OUTCOME_TRANSFORMATION,
    questions=(
        "This seems binary - either complete or not. What measurable improvement will we see once "
        "this is finished?",
        "When this is done, what will be different? How will you measure that change?",
        "What happens after completion? What outcomes does it enable?",
    ),
    examples=(
        ReframingExample(
            before="Website redesign completed successfully",
            after="Increase user engagement by 50% through improved site experience",
            context="Marketing",
            explanation="Transformed from completion status to measurable user behavior change",
        ),
    ),
    success_criteria=(
        "User provides measurable outcomes instead of completion status",
        "User describes quantifiable changes or improvements",
    ),
    max_attempts=3,
)

VALUE_EXPLORATION = ReframingStrategy(
    name="Value Exploration",
    technique=Technique.VALUE_EXPLORATION,
    questions=(
        "These are interesting numbers, but how do they connect to business value? What happens "
        "when you achieve this metric?",
        "What business outcome would this metric indicate? How does it drive revenue or customer value?",
        "If you hit these numbers, what changes for your business or customers?",
    ),
    examples=(
        ReframingExample(
            before="Increase social media followers to 10,000",
            after="Drive 25% more qualified leads through improved social media engagement",
            context="Marketing",
            explanation="Connected followers to business outcome of lead generation",
        ),
    ),
    success_criteria=(
        "User connects metrics to business value",
        "User explains how metric drives revenue/customer outcomes",
    ),
    max_attempts=3,
)

AMBITION_CALIBRATION = ReframingStrategy(
    name="Ambition Calibration",
    technique=Technique.QUESTION_CASCADE,
    questions=(
        "This sounds like important ongoing work. For OKRs, let's focus on improvements - how could "
        "you excel beyond normal execution?",
        "What would make this feel like a real stretch goal? What would success look like that would "
        "make you celebrate?",
        "If you had unlimited resources, what ambitious outcome would you pursue in this area?",
    ),
    examples=(
        ReframingExample(
            before="Maintain current customer satisfaction levels",
            after="Achieve industry-leading customer satisfaction with 95% positive ratings",
            context="Customer Service",
            explanation="Transformed from maintaining status quo to achieving industry leadership",
        ),
    ),
    success_criteria=(
        "User raises ambition level significantly",
        "User provides stretch goals that require effort beyond normal duties",
    ),
    max_attempts=3,
)

FOCUS = ReframingStrategy(
    name="Focus Strategy",
    technique=Technique.QUESTION_CASCADE,
    questions=(
        "You have lots of great metrics! Let's focus on the 3-4 that best indicate success. Which ones "
        "are most critical?",
        "If you could only track 3 numbers to know if this objective succeeds, what would they be?",
        "Which of these metrics would you check first each week to gauge progress?",
    ),
    examples=(
        ReframingExample(
            before="Track 8 different metrics including users, sessions, bounce rate, conversion, "
                   "retention, revenue, costs, and satisfaction",
            after="Focus on 3 key indicators: user retention (+20%), conversion rate (+15%), and "
                  "customer lifetime value (+30%)",
            context="Product",
            explanation="Narrowed from 8 metrics to 3 most critical outcome indicators",
        ),
    ),
    success_criteria=(
        "User reduces number of metrics to 3-5 key indicators",
        "User prioritizes most important success measures",
    ),
    max_attempts=2,
)

SPECIFICITY = ReframingStrategy(
    name="Specificity Enhancement",
    technique=Technique.QUESTION_CASCADE,
    questions=(
        "Can you be more specific about what 'better' or 'more' means? What exact numbers would "
        "represent success?",
        "What would 'good' look like with specific, measurable criteria?",
        "How will you know when you've achieved 'significant improvement'? What's the specific target?",
    ),
    examples=(
        ReframingExample(
            before="Improve customer satisfaction",
            after="Increase customer satisfaction score from 7.2 to 8.5 on our monthly survey",
            context="Customer Service",
            explanation="Added specific baseline, target, and measurement method",
        ),
    ),
    success_criteria=(
        "User provides specific numbers and targets",
        "User defines clear measurement criteria",
    ),
    max_attempts=2,
)

# Used when the user already pushed back on a pattern or the primary
# strategy has run out of questions: lead with worked examples instead.
EXAMPLE_DRIVEN_QUESTION = (
    "Here is how others reframed a similar goal. Which version feels closer to what you want "
    "to achieve, and what would yours look like?"
)
