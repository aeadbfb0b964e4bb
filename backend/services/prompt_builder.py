"""All prompt templates for Gemini API calls."""

from models.responses import FinalResult

# Keep prompts inside the model's comfortable context
MAX_JOB_PROMPT_CHARS = 3000
MAX_RESUME_PROMPT_CHARS = 4000


def build_analysis_prompt(
    job_description: str,
    resume_text: str,
    aspect_weights: dict[str, float] | None = None,
) -> str:
    """Call A: per-aspect semantic scoring of the résumé against the job."""
    weights = aspect_weights or {}
    weight_lines = "\n".join(
        f"- {name} ({round(weight * 100)}% weight)" for name, weight in weights.items()
    )

    return f"""You are an expert CV/resume analyst and ATS (Applicant Tracking System) specialist.

Analyze this CV against the job description. Be brutally honest and do not inflate scores.

SCORING RUBRIC (follow strictly):
- 0-20:  No relevant match. CV is for a completely different field.
- 20-40: Weak match. Some transferable skills but major gaps in core requirements.
- 40-60: Moderate match. Meets some key requirements but missing several important ones.
- 60-80: Strong match. Meets most requirements with minor gaps.
- 80-100: Exceptional match. Meets or exceeds nearly all requirements.

ASPECTS:
{weight_lines}

JOB DESCRIPTION:
---
{job_description}
---

CV/RESUME:
---
{resume_text}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "overall_score": <integer 0-100, weighted average of the aspects>,
  "aspects": {{
    "skills_match": {{"score": <integer 0-100>, "feedback": "<specific feedback>"}},
    "experience_quality": {{"score": <integer 0-100>, "feedback": "<specific feedback>"}},
    "education_fit": {{"score": <integer 0-100>, "feedback": "<specific feedback>"}},
    "career_growth": {{"score": <integer 0-100>, "feedback": "<specific feedback>"}}
  }},
  "strengths": [<3-5 specific skills or experience from the CV that MATCH the job>],
  "weaknesses": [<3-5 specific job requirements that are MISSING or weak in the CV>],
  "summary": "<2-3 sentence honest summary>",
  "detailed_assessment": "<one paragraph explaining the overall fit>",
  "is_fake": <true only if either text is clearly not a real CV or job posting>
}}"""


def build_optimization_prompt(
    job_description: str,
    resume_text: str,
    level: str,
    rules: list[str],
    analysis: FinalResult | None = None,
) -> str:
    """Call B: structured rewrite of the résumé under a rewrite policy."""
    rules_text = "\n".join(f"- {rule}" for rule in rules)
    if analysis is not None:
        analysis_section = f"""
CURRENT ANALYSIS:
- Match score: {analysis.final_score}%
- Weaknesses identified: {'; '.join(analysis.weaknesses[:5])}
- Strengths identified: {'; '.join(analysis.strengths[:5])}
"""
    else:
        analysis_section = ""

    return f"""You are an expert CV writer and career consultant.

Rewrite this CV to better match the job description.

OPTIMIZATION LEVEL: {level.upper()}
{rules_text}

NEVER, AT ANY LEVEL:
- Invent employers, job titles, degrees, institutions or certifications
- Change company names, institution names or employment dates
- Copy phrases from the job description and present them as experience
{analysis_section}
JOB DESCRIPTION:
---
{job_description[:MAX_JOB_PROMPT_CHARS]}
---

ORIGINAL CV:
---
{resume_text[:MAX_RESUME_PROMPT_CHARS]}
---

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "contact_info": {{"name": "", "email": "", "phone": "", "location": "", "linkedin": "", "github": ""}},
  "summary": "<3-4 sentence professional summary aligned with the job>",
  "skills": {{"technical": [<skills>], "soft": [<skills>]}},
  "experience": [
    {{
      "title": "<job title EXACT from original>",
      "company": "<company name EXACT from original>",
      "location": "",
      "duration": "<dates EXACT from original>",
      "achievements": [<achievement bullets>]
    }}
  ],
  "education": [
    {{"degree": "<EXACT from original>", "institution": "<EXACT from original>", "year": "", "details": ""}}
  ],
  "projects": [{{"name": "", "description": "", "technologies": []}}],
  "certifications": [<EXACT from original>],
  "changes": {{
    "added_keywords": [<keywords genuinely applicable>],
    "emphasized_skills": [<skills>],
    "reordered_experience": <true|false>,
    "optimized_summary": <true|false>
  }},
  "change_notes": [<3-5 specific changes you made>],
  "expected_score": <realistic expected match score after the changes, 0-100>,
  "honest_assessment": "<1-2 sentences about the realistic fit>"
}}"""
