"""
Prompt construction for the evaluation pass.

`build_evaluation_prompt` is pure: the same EvaluationInput always renders to
the same string (nothing time-dependent is embedded).
"""
from typing import Optional

from app.features.evaluation.schemas.evaluation import EvaluationInput

PROMPT_HEADINGS_LIMIT = 10
PROMPT_CONTENT_LIMIT = 3000
PROMPT_CTAS_LIMIT = 5

SYSTEM_PROMPT = """You are an expert product reviewer evaluating web applications.
Think like a real human visiting this site for the first time.

## Your Evaluation Approach

**1. FIRST IMPRESSIONS (5-second test)**
- What do you immediately understand about this product?
- Is the purpose instantly clear?
- Does it feel trustworthy and professional?

**2. USABILITY WALKTHROUGH**
- Can a new user figure out what to do without instructions?
- Are CTAs clear and compelling?
- Is navigation intuitive or confusing?

**3. PRODUCT-MARKET FIT**
- Who specifically needs this?
- How urgent is the problem it solves?
- Is the value proposition compelling?

**4. TRUST & CREDIBILITY**
- Does it look professional and maintained?
- Are there trust signals (testimonials, logos, security)?
- Would you enter payment info here?

## Scoring Guidelines
- 1-3: Fundamental problems - confusing, untrustworthy, unclear purpose
- 4-5: Functional but significant UX/clarity gaps
- 6-7: Good execution, minor friction points
- 8-9: Excellent - clear, trustworthy, compelling
- 10: Best in class

Be honest and specific. Avoid generic feedback.
Return ONLY valid JSON, no markdown."""

RUBRIC = """---

## Step 1: First Impressions

Before scoring, capture your immediate reaction (5-second test):
- What does this product do? (one sentence)
- Who is it for? (specific persona)
- Trust level: Would you enter your email? Credit card?

## Step 2: Score Each Metric

Evaluate on these 9 metrics. Give each an integer score from 1 to 10 and a one-sentence reason:

**Product Metrics:**
1. usability - Can a new user accomplish the core task without confusion? Consider first-time experience, cognitive load, clarity of next steps.
2. value - Is it immediately clear what problem this solves and why it matters? Would you pay for this?
3. features - Does it have what's needed to deliver on its promise? Not feature-count, but the right features.
4. polish - Does it feel finished? Professional design, smooth interactions, no errors or rough edges.
5. competition - What makes this different from alternatives? Is the differentiator clear and compelling?

**Business Metrics:**
6. market - Is there a real, reachable audience who would want this? How badly do they need it?
7. monetization - Is there a clear path to revenue? Pricing visible? Value justifies cost?
8. maintenance - How complex would this be to maintain? (1=simple, 10=very complex infrastructure).
9. growth - Are there natural ways for this to spread? Word-of-mouth, viral loops, network effects?

## Step 3: Recommendations

Provide 3 specific, actionable improvements that would have the biggest impact.

Return your evaluation as JSON in this exact format:
{
  "firstImpressions": {
    "whatItDoes": "One sentence description of the product",
    "targetUser": "Specific persona who needs this",
    "trustLevel": "low" | "medium" | "high"
  },
  "product": {
    "usability": { "score": <1-10>, "reason": "..." },
    "value": { "score": <1-10>, "reason": "..." },
    "features": { "score": <1-10>, "reason": "..." },
    "polish": { "score": <1-10>, "reason": "..." },
    "competition": { "score": <1-10>, "reason": "..." }
  },
  "business": {
    "market": { "score": <1-10>, "reason": "..." },
    "monetization": { "score": <1-10>, "reason": "..." },
    "maintenance": { "score": <1-10>, "reason": "..." },
    "growth": { "score": <1-10>, "reason": "..." }
  },
  "recommendations": ["Specific improvement 1", "Specific improvement 2", "Specific improvement 3"],
  "summary": "2-3 sentence overall assessment with key strengths and areas for improvement"
}"""


def _or(value: Optional[object], fallback: str) -> str:
    if value is None or value == "":
        return fallback
    return str(value)


def _yes_no(flag: bool, yes: str = "Yes") -> str:
    return yes if flag else "No"


def build_evaluation_prompt(data: EvaluationInput) -> str:
    performance = data.performance
    content = data.content

    if data.competitors:
        competitors_text = "\n".join(
            f"- {c.name}"
            + (f" ({c.url})" if c.url else "")
            + (f": {c.notes}" if c.notes else "")
            for c in data.competitors
        )
    else:
        competitors_text = "None specified"

    if performance.issues:
        issues_text = "\n".join(
            f"- [{issue.severity}] {issue.message}"
            + (f" (fix: {issue.recommendation})" if issue.recommendation else "")
            for issue in performance.issues
        )
    else:
        issues_text = "No critical issues detected"

    ctas_text = ", ".join(content.ctas[:PROMPT_CTAS_LIMIT]) or "None detected"
    technologies_text = ", ".join(content.technologies) or "Not detected"
    headings_text = "\n".join(content.headings[:PROMPT_HEADINGS_LIMIT]) or "None found"
    excerpt = content.main_content[:PROMPT_CONTENT_LIMIT] or "Could not extract content"

    sections = [
        "## Project Information",
        f"- Name: {data.project_name}",
        f"- URL: {data.url}",
        f"- Description: {_or(data.description, 'Not provided')}",
        f"- Category: {_or(data.category, 'Not specified')}",
        f"- Target Audience: {_or(data.target_audience, 'Not specified')}",
        "",
        "## Competitors",
        competitors_text,
        "",
        "## Technical Analysis (PageSpeed Insights, 0-100 scale)",
        f"- Performance: {_or(performance.performance, 'N/A')}",
        f"- Accessibility: {_or(performance.accessibility, 'N/A')}",
        f"- SEO: {_or(performance.seo, 'N/A')}",
        f"- Mobile: {_or(performance.mobile, 'N/A')}",
        f"- Technical: {_or(performance.technical, 'N/A')}",
        f"- Security (HTTPS): {_or(performance.security, 'N/A')}",
        "",
        "## Detected Issues",
        issues_text,
        "",
        "## Website Details",
        f"- Page Title: {_or(content.title, 'Not found')}",
        f"- Meta Description: {_or(content.meta_description, 'Not found')}",
        f"- Has Pricing Page: {_yes_no(content.has_pricing)}",
        f"- Has Login/Auth: {_yes_no(content.has_login)}",
        f"- Technologies: {technologies_text}",
        "",
        "## UX Signals",
        f"- CTAs Found: {ctas_text}",
        f"- Social Proof: {_yes_no(content.has_social_proof, 'Yes (testimonials/reviews present)')}",
        f"- Security Badges: {_yes_no(content.has_security_badges)}",
        f"- Video Content: {_yes_no(content.has_video)}",
        f"- FAQ Section: {_yes_no(content.has_faq)}",
        "",
        "## Headings Found",
        headings_text,
        "",
        "## Page Content (excerpt)",
        excerpt,
        "",
        RUBRIC,
    ]
    return "\n".join(sections)
