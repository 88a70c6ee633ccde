"""Render the scoring prompt with Jinja2.

The template lives in the ``prompt_templates`` package directory and is
rendered with StrictUndefined so a missing variable fails loudly instead of
producing a silently truncated prompt.
"""

from typing import List

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from jobsearch.domain.models import CandidateProfile, ListingCandidate
from jobsearch.logging import get_logger
from jobsearch.utils.text import normalize_whitespace

from .exceptions import ScoringError

logger = get_logger(__name__, component="scoring")

DEFAULT_TEMPLATE = "match_prompt.txt.j2"


def _experience_lines(profile: CandidateProfile) -> List[str]:
    lines = []
    for experience in profile.experiences_by_recency():
        position = normalize_whitespace(experience.position or "")
        company = normalize_whitespace(experience.company)
        if position and company:
            lines.append(f"{position} at {company}")
        elif position or company:
            lines.append(position or company)
    return lines


class PromptRenderer:
    """Builds the prompt sent to the scoring command for one listing."""

    def __init__(self, template_dir: str = "prompt_templates", template_name: str = DEFAULT_TEMPLATE):
        self.template_name = template_name
        self.env = Environment(
            loader=PackageLoader("jobsearch.scoring", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=False,
        )

    def render(self, listing: ListingCandidate, profile: CandidateProfile) -> str:
        """Render the prompt for one listing.

        Raises:
            ScoringError: If the template cannot be loaded or rendered
        """
        context = {
            "listing": listing,
            "profile": profile,
            "skills": profile.flattened_skills,
            "experiences": _experience_lines(profile),
            "degrees": profile.degrees,
        }
        try:
            template = self.env.get_template(self.template_name)
            return template.render(context).strip()
        except TemplateError as e:
            logger.error(
                f"Failed to render scoring prompt: {e}",
                extra={"event": "scoring.prompt.failed", "template": self.template_name},
            )
            raise ScoringError(f"Failed to render scoring prompt: {e}") from e
