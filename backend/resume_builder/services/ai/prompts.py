"""
Prompt templates for the AI tasks.

Every prompt is a fixed preamble, the serialized input, optional knowledge
for the task, and closing formatting instructions.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def format_knowledge(knowledge: List[Dict[str, Any]]) -> str:
    """Render knowledge entries as a prompt section, or an empty string."""
    if not knowledge:
        return ""
    return f"\nKnowledge To Answer:\n{to_json(knowledge)}\n"


def cv_extraction_prompt(text: str, knowledge: Optional[List[Dict[str, Any]]] = None) -> str:
    year = datetime.now(timezone.utc).year
    return f"""Extract structured CV/resume information from the following text.
Analyze the text carefully and extract all relevant professional details.

Text of raw CV to analyze:
{text}
{format_knowledge(knowledge)}
Please extract and structure the information according to the following guidelines:

- Personal information: Extract full name (split into firstName and lastName), email, phone, location, country, website, and LinkedIn profile.
- Professional title: Based on the provided CV, extract or infer the most appropriate professional title that reflects the candidate's role, seniority level, and area of expertise. This field is MANDATORY and should be included as personalInfo.professionalHeadline in the response. For example: "Senior Business Analyst with 5+ years of experience".
- Summary/Professional summary: A concise overview of the person's career and expertise.
- Education: List all educational qualifications with degree, institution, start and end dates (in YYYY-MM format), description, and whether it's current (isPresent).
- Work experience: Details of all professional roles with title, company, start and end dates (in YYYY-MM format), description, and whether it's current (isPresent).
- Skills: List of professional skills and competencies.
- Projects: Any significant projects with title, role, dates, description, URL/link, and current status.
- Certifications: Professional certifications with name, issuing organization, date, and URL.
- Languages: Languages known with proficiency level.
- Additional information: Any other relevant details like interests, achievements, publications, and references.
- The current year is {year}, so if the candidate is still a student, add "Student" to the professionalHeadline field.
For dates, use YYYY-MM format (e.g., 2020-05). For URLs, include the full address with http/https prefix.

IMPORTANT: You MUST include a professionalHeadline field within the personalInfo object, even if you have to infer it from the experience or skills."""


def job_description_prompt(text: str, knowledge: Optional[List[Dict[str, Any]]] = None) -> str:
    return f"""Extract structured Job Description information from the following text.
Analyze the text carefully and extract all relevant job details.

Text of raw Job Description to analyze:
{text}
{format_knowledge(knowledge)}
Please extract and structure the information according to the following guidelines:
- Convert all the information to English with unchanged meaning
- Job position: The main position title
- Company: The company offering the position
- Location: Where the job is located
- Job type: The employment type (full-time, part-time, contract, internship)
- Description: A detailed description of the role and responsibilities, don't use bullet points
- Requirements: List of required qualifications, skills, and experience
- Responsibilities: List of job duties and responsibilities
- Benefits: List of benefits offered
- Salary: Salary range with currency and period (if available)
- Keywords: Important skills or technologies mentioned
- Application deadline: When applications are due (if mentioned)
- Remote status: Remote status of the job (if mentioned)
- Contact information: How to apply or contact for more information

IMPORTANT: You MUST include at least the title, company, description, and requirements fields."""


def resume_match_prompt(
    cv: Dict[str, Any],
    job_description: Dict[str, Any],
    knowledge: Optional[List[Dict[str, Any]]] = None,
) -> str:
    return f"""Analyze the following CV and Job Description to create a tailored resume.

CV Information:
{to_json(cv)}

Job Description:
{to_json(job_description)}
{format_knowledge(knowledge)}
Please analyze the CV and Job Description to:
1. Match relevant experiences
2. Identify matching skills
3. Select appropriate education background
4. Choose relevant projects
5. Include relevant certifications
6. List required languages
7. Match the role of the resume with the job description
For each matched item, provide:
- A relevance score (0-100)
- A comment explaining why it's relevant

Return the result in the specified JSON schema format."""


def resume_tips_prompt(
    cv: Dict[str, Any],
    job_description: Dict[str, Any],
    knowledge: Optional[List[Dict[str, Any]]] = None,
) -> str:
    return f"""Analyze the following job description and provide detailed tips for creating a resume/CV.

Text of Job Description to analyze:
{to_json(job_description)}
based on this CV:
{to_json(cv)}
{format_knowledge(knowledge)}
Please provide tips and examples for each section of the resume:
1. Personal Information: How to present personal details effectively
2. Summary: How to write an impactful summary that matches the job requirements
3. Experience: How to highlight relevant experience and achievements
4. Education: How to present educational background effectively
5. Skills: Which skills to emphasize and how to present them
6. Projects: What types of projects to highlight
7. Certifications: Relevant certifications to include
8. Languages: How to present language skills
9. Activities: Relevant activities to include
10. Additional Information: What extra information might be valuable
11. Custom Fields: Any special sections that might be relevant

For each section, provide:
- 3-4 tips for the resume to follow the job description
- Specific tips based on the job description
- Concrete examples where applicable
- Explanations of why certain elements are important

Return the structured tips in the specified JSON schema format."""


def chatbot_prompt(
    user_message: str,
    task_name: str,
    current_data: Optional[Dict[str, Any]] = None,
    knowledge: Optional[List[Dict[str, Any]]] = None,
) -> str:
    data = (current_data or {}).get("data") or current_data or {}
    form_fields = (
        "personalInfo", "summary", "education", "experience", "skills", "projects",
        "certifications", "languages", "customFields", "roleApply",
    )
    form_data = {key: data.get(key) for key in form_fields if key in data}

    return f"""The User Message is: {user_message}
Based on the user's current CV: {to_json(data.get("originalCV"))}
And Job Description: {to_json(data.get("jobDescription"))}
Help the user improve the form data they are editing: {to_json(form_data)}
Knowledge To Answer: {to_json(knowledge or [])}
Based on the user's message and the provided knowledge:
1. Use the knowledge content to formulate a helpful response
2. If the knowledge doesn't contain relevant information, provide general guidance
3. Keep the response focused on the current task: {task_name}
4. Format the response according to the specified schema with:
- outputMessage: The main response to show to the user
- actionRequired: Any specific action the user needs to take (if applicable)
- currentTask: The current task being handled ({task_name})"""


def format_history(history: List[Dict[str, str]]) -> str:
    lines = []
    for turn in history:
        role = "assistant" if turn.get("role") in ("assistant", "model") else "user"
        lines.append(f"{role}: {turn.get('content', '')}")
    return "\n".join(lines) if lines else "(no previous messages)"


def intent_prompt(
    user_message: str,
    history: List[Dict[str, str]],
    catalogue: List[Dict[str, str]],
) -> str:
    tasks = "\n".join(
        f"- {task['taskName']}: {task.get('title') or ''} {task.get('description') or ''}".rstrip()
        for task in catalogue
    ) or "- GENERAL: general questions"

    return f"""You route messages for a CV/resume writing assistant.
Classify the user's latest message into exactly one of the available tasks.

Conversation so far:
{format_history(history)}

Latest user message:
{user_message}

Available tasks:
{tasks}
- GENERAL: anything that does not clearly match a task above

Scoring guidance for "confidence":
- 0.9 to 1.0: the message unambiguously matches the task
- 0.7 to 0.9: the match is clear but slightly ambiguous
- 0.5 to 0.7: a moderate match
- 0.3 to 0.5: a weak match
- below 0.3: no real match, use GENERAL

Respond with JSON containing "intent" (a short snake_case label), "confidence" (0 to 1)
and "taskName" (one of the available task names, copied exactly)."""
