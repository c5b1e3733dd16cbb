"""
Prompt Builder
Prompt templates for page, element and copy generation.
"""

from typing import Sequence

from ..core.validate import PageGenerationRequest


class SystemPrompts:
    """System instructions per task."""

    PAGE_GENERATOR = (
        "You are an expert landing page designer who creates high-converting pages "
        "using proven design patterns and compelling copy."
    )
    COPY_OPTIMIZER = (
        "You are a conversion copywriting expert who optimizes headlines, CTAs, "
        "and body copy for maximum engagement."
    )
    SEO_SPECIALIST = (
        "You are an SEO expert who creates optimized meta tags and content structure "
        "for better search rankings."
    )
    UX_DESIGNER = (
        "You are a UX expert who designs intuitive, user-friendly interfaces that "
        "guide visitors toward conversion goals."
    )


HTML_OUTPUT_RULES = """OUTPUT RULES:
1. Return a single HTML document: <html><head><title>...</title><meta name="description" content="..."></head><body>...</body></html>
2. Use inline style attributes for all visual styling; no <style> or <script> tags
3. Use semantic tags: section, header, footer, nav, h1-h4, p, a, button, img, form, input
4. Every top-level section is a direct child of <body>
5. Images use descriptive alt text and https placeholder URLs
6. Return ONLY HTML, no markdown fences or explanations"""

JSON_PAGE_FORMAT = """OUTPUT FORMAT (JSON):
{
  "title": "Page title",
  "description": "Page description",
  "seoTitle": "SEO-optimized title (60 chars max)",
  "seoDescription": "SEO-optimized description (160 chars max)",
  "components": [
    {"type": "Hero|Features|Pricing|Testimonials|CTA|FAQ|Form|Newsletter",
     "props": {}, "content": {}}
  ]
}
Return ONLY valid JSON, no markdown or explanations."""


class PromptBuilder:
    """Builds prompts from request parts."""

    @staticmethod
    def build_structured(system: str, context: str, request: str) -> str:
        """
        Assemble a sectioned prompt.

        Args:
            system: Task instructions
            context: Reference material (may be empty)
            request: The concrete ask

        Returns:
            Complete prompt
        """
        parts = [system]

        if context:
            parts.append(f"\n=== CONTEXT ===\n{context}")

        parts.append(f"\n=== REQUEST ===\n{request}")

        return "\n".join(parts)

    @staticmethod
    def page_brief(request: PageGenerationRequest) -> str:
        """Bullet summary of the page request."""
        return "\n".join(
            [
                f"- Description: {request.description}",
                f"- Page Type: {request.page_type}",
                f"- Industry: {request.industry or 'general'}",
                f"- Target Audience: {request.target_audience or 'general audience'}",
                f"- Brand Voice: {request.brand_voice or 'professional and friendly'}",
            ]
        )

    @classmethod
    def page_html(cls, request: PageGenerationRequest, examples_context: str = "") -> str:
        system = (
            f"Design a complete, conversion-focused {request.page_type} page as HTML.\n\n"
            f"{HTML_OUTPUT_RULES}"
        )
        return cls.build_structured(system, examples_context, cls.page_brief(request))

    @classmethod
    def page_json(cls, request: PageGenerationRequest, examples_context: str = "") -> str:
        system = (
            f"Generate a complete {request.page_type} page structure with 4-6 components.\n\n"
            f"{JSON_PAGE_FORMAT}"
        )
        return cls.build_structured(system, examples_context, cls.page_brief(request))

    @staticmethod
    def edit_element(element_html: str, instruction: str) -> str:
        return (
            "You are editing one element of a web page.\n\n"
            f"CURRENT ELEMENT:\n{element_html}\n\n"
            f"INSTRUCTION:\n{instruction}\n\n"
            "Return ONLY the modified element as HTML with a single root tag. Keep inline "
            "style attributes for styling, keep the same root tag unless the instruction "
            "requires otherwise, and do not wrap the result in markdown."
        )

    @staticmethod
    def component(component_type: str, context: str | None = None) -> str:
        lines = [
            f"Generate a {component_type} component in JSON format.",
            "",
            f'Return JSON: {{"type": "{component_type}", "props": {{...}}, "content": {{...}}}}',
            "",
            "Guidelines:",
            "- Make it conversion-focused",
            "- Use clear, action-oriented copy",
            "- Include realistic placeholder content",
            "- Return ONLY valid JSON",
        ]
        if context:
            lines[1:1] = ["", f"Context: {context}"]
        return "\n".join(lines)

    @staticmethod
    def optimizations(page_content: str, goals: Sequence[str] = ()) -> str:
        goal_line = f"Goals: {', '.join(goals)}\n\n" if goals else ""
        return (
            "Analyze the content below and suggest conversion improvements.\n\n"
            f"{goal_line}CONTENT:\n{page_content}\n\n"
            "Return a JSON array:\n"
            '[{"type": "headline|cta|copy|layout|seo", "current": "...", '
            '"suggestions": ["..."], "reasoning": "...", "impact": "high|medium|low"}]\n'
            "Provide 3-5 specific suggestions. Return ONLY valid JSON."
        )

    @staticmethod
    def headlines(original: str, context: str, count: int = 5) -> str:
        return (
            f"Generate {count} headline variations for A/B testing.\n\n"
            f'Original: "{original}"\n'
            f"Context: {context}\n\n"
            "Rules:\n"
            "1. Keep under 10 words\n"
            "2. Lead with benefits, not features\n"
            "3. Be specific and clear\n\n"
            'Return JSON array of strings: ["Headline 1", "Headline 2", ...]'
        )

    @staticmethod
    def seo(page_content: str, keywords: Sequence[str]) -> str:
        return (
            "Generate SEO metadata for this page.\n\n"
            f"Content: {page_content}\n"
            f"Target Keywords: {', '.join(keywords)}\n\n"
            "Return JSON:\n"
            '{"title": "SEO title (60 chars max)", "description": "Meta description (160 chars max)", '
            '"keywords": ["..."], "suggestions": ["..."]}'
        )

    @staticmethod
    def text_variants(original: str, text_type: str, count: int, context: str | None = None) -> str:
        label = {
            "headline": "headline",
            "subheadline": "subheadline",
            "cta": "call-to-action button text",
            "body": "body copy",
            "description": "description",
        }.get(text_type, text_type)
        context_line = f"Context: {context}\n" if context else ""
        return (
            f"Write {count} alternative versions of this {label} for an A/B test.\n\n"
            f'Original: "{original}"\n{context_line}\n'
            "Each variant should test a different angle (benefit, urgency, curiosity, "
            "social proof) while keeping a similar length.\n\n"
            "Return ONLY a JSON array of strings."
        )
