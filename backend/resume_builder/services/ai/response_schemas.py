"""
Canonical structured-output schemas for every AI task.

These define the contract the rest of the application parses against, so a
stored task configuration can never replace them.
"""

from typing import Any, Dict, List


def _string(description: str = "", nullable: bool = False, **extra) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "string"}
    if description:
        schema["description"] = description
    if nullable:
        schema["nullable"] = True
    schema.update(extra)
    return schema


def _string_list(description: str = "") -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "array", "items": {"type": "string"}}
    if description:
        schema["description"] = description
    return schema


def _object(properties: Dict[str, Any], required: List[str] = None, description: str = "") -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    if description:
        schema["description"] = description
    return schema


def _relevance(what: str) -> Dict[str, Any]:
    return {
        "type": "integer",
        "minimum": 0,
        "maximum": 100,
        "description": f"AI-assessed relevance score (0-100) of this {what} to the job description.",
    }


def _tips_section(description: str, example: Dict[str, Any]) -> Dict[str, Any]:
    return _object(
        {
            "tips": {
                "type": "array",
                "description": f"Tips for the {description} of the resume based on the job description.",
                "items": _string(f"A specific tip for the {description} section."),
            },
            "example": example,
        },
        description=f"Tips and example for the {description} section of the resume based on the job description.",
    )


CV_EXTRACT_SCHEMA: Dict[str, Any] = _object(
    {
        "personalInfo": _object(
            {
                "firstName": _string(),
                "lastName": _string(),
                "professionalHeadline": _string("Professional title"),
                "email": _string("Email"),
                "phone": _string("Phone number"),
                "location": _string("Location but not include country"),
                "country": _string("Country only", nullable=True),
                "website": _string(
                    "Link to the website, portfolio, blog, github (can be extracted from project link), "
                    "there is no space between the link and the text",
                    nullable=True,
                ),
                "linkedin": _string(
                    "LinkedIn profile, there is no space between the link and the text", nullable=True
                ),
            },
            required=["firstName", "lastName", "professionalHeadline", "email", "phone", "location", "country"],
        ),
        "summary": _string(
            "Summary of the candidate written as a description of the candidate with the professional voice",
            maxLength=2000,
        ),
        "education": {
            "type": "array",
            "items": _object(
                {
                    "degree": _string(),
                    "institution": _string(),
                    "startDate": _string(nullable=True),
                    "endDate": _string(nullable=True),
                    "description": _string(),
                    "isPresent": {"type": "boolean", "nullable": True},
                },
                required=["degree", "institution", "startDate"],
            ),
        },
        "experience": {
            "type": "array",
            "items": _object(
                {
                    "position": _string("Job title"),
                    "company": _string("Company name"),
                    "startDate": _string("Start date (YYYY-MM)", nullable=True),
                    "endDate": _string("End date (YYYY-MM), empty if still working", nullable=True),
                    "description": _string(
                        "Detailed description of the job and achievements extracted from the text, "
                        "IMPORTANT: MUST BE EXTRACTED FROM THE TEXT"
                    ),
                    "isPresent": {"type": "boolean", "description": "Is this job current", "nullable": True},
                },
                required=["position", "description", "company", "startDate"],
            ),
        },
        "skills": {
            "type": "array",
            "items": _string(
                "Skill in the CV's skills section and/or mentioned in the descriptions of past work "
                "experiences or projects. It must be short (no more than 3 words) and at least 5 skills; "
                "if the text has no skills, suggest 5 skills based on the title, position and description of the CV"
            ),
        },
        "projects": {
            "type": "array",
            "items": _object(
                {
                    "title": _string("Project name"),
                    "role": _string(
                        "Role in the project",
                        enum=["Developer", "Designer", "Manager", "Collaborator", "Leader", "Team member"],
                    ),
                    "startDate": _string("Start date (YYYY-MM)", nullable=True),
                    "endDate": _string("End date (YYYY-MM), empty if still working", nullable=True),
                    "description": _string("Detailed description of the project and contributions"),
                    "url": _string("Link to the project (if any)", nullable=True),
                    "isPresent": {"type": "boolean", "description": "Is this project current", "nullable": True},
                },
                required=["title", "role", "startDate"],
            ),
        },
        "certifications": {
            "type": "array",
            "items": _object(
                {
                    "name": _string("Full name of the certification", nullable=True),
                    "issuer": _string("Issuing organization", nullable=True),
                    "date": _string("Date of the certification (YYYY-MM)", nullable=True),
                    "url": _string("Link to the certification (if any)", nullable=True),
                },
                required=["name", "issuer", "date"],
            ),
        },
        "languages": {
            "type": "array",
            "items": _object(
                {
                    "language": _string("Language name"),
                    "proficiency": _string(
                        "Language proficiency (Native, Fluent, Intermediate, Basic)",
                        enum=["Native", "Fluent", "Intermediate", "Basic"],
                    ),
                },
                required=["language", "proficiency"],
            ),
        },
        "additionalInfo": _object(
            {
                "interests": _string("Interests of the candidate, NULL if not present", nullable=True),
                "achievements": _string("Achievements of the candidate, NULL if not present", nullable=True),
                "publications": _string("Publications of the candidate, NULL if not present", nullable=True),
                "references": _string("References of the candidate, NULL if not present", nullable=True),
            }
        ),
        "customFields": {
            "type": "array",
            "items": _object(
                {
                    "label": _string("Label of the custom field"),
                    "value": _string("Value of the custom field"),
                },
                required=["label", "value"],
            ),
        },
    },
    required=[
        "personalInfo",
        "summary",
        "education",
        "experience",
        "skills",
        "projects",
        "certifications",
        "languages",
    ],
)


JOB_DESCRIPTION_REQUIRED_FIELDS = [
    "position",
    "jobLevel",
    "employmentType",
    "companyName",
    "location",
    "remoteStatus",
    "experienceRequired",
    "department",
    "summary",
    "requirements",
    "responsibilities",
    "benefits",
    "salary",
    "keywords",
    "applicationDeadline",
]

JOB_DESCRIPTION_SCHEMA: Dict[str, Any] = _object(
    {
        "position": _string(
            "Job title extracted from the Job Description, not including company name, location, "
            "job type or job level"
        ),
        "companyName": _string("Company name"),
        "location": _string_list("Location of the job, the more detailed the better"),
        "experienceRequired": _object(
            {
                "min": {"type": "number", "description": "Minimum experience required for the job"},
                "max": {"type": "number", "description": "Maximum experience required for the job"},
                "description": _string("Experience required for the job, the more detailed the better"),
            },
            required=["min", "max", "description"],
        ),
        "department": _string("Department of the job"),
        "remoteStatus": _string("Remote status of the job", enum=["On-site", "Remote", "Hybrid"]),
        "employmentType": _string(
            "Job type", enum=["Full-time", "Part-time", "Contract", "Internship"]
        ),
        "jobLevel": _string(
            "Job level",
            enum=["Intern", "Junior", "Mid", "Senior", "Lead", "Manager", "Director", "Executive"],
        ),
        "summary": _string("Detailed description of the job"),
        "requirements": _string_list("List of requirements"),
        "responsibilities": _string_list("List of responsibilities"),
        "benefits": _string_list("List of benefits"),
        "salary": _object(
            {
                "min": {"type": "number"},
                "max": {"type": "number"},
                "currency": _string(),
                "period": _string(),
            }
        ),
        "keywords": _string_list("Keywords related to the job, skills candidate needs"),
        "applicationDeadline": _string(
            "Application deadline in ISO format (YYYY-MM-DDTHH:mm:ss.sssZ) or null if not mentioned or invalid date"
        ),
        "contactInfo": _object({"name": _string(), "email": _string(), "phone": _string()}),
    },
    required=list(JOB_DESCRIPTION_REQUIRED_FIELDS),
)


RESUME_MATCH_SCHEMA: Dict[str, Any] = _object(
    {
        "personalInfoData": _object(
            {
                "firstName": _string("Suggested first name based on CV, possibly standardized."),
                "lastName": _string("Suggested last name based on CV, possibly standardized."),
                "professionalHeadline": _string(
                    "A professional headline tailored to the job description and the role being applied for."
                ),
                "email": _string("Candidate's email address from CV."),
                "phone": _string("Candidate's phone number from CV."),
                "location": _string("Candidate's location (e.g., City, State) from CV."),
                "country": _string("Candidate's country from CV."),
                "website": _string("Candidate's personal website or portfolio link from CV."),
                "linkedin": _string("Candidate's LinkedIn profile URL from CV."),
            },
            required=["professionalHeadline"],
            description="Personal information extracted and potentially refined from the CV.",
        ),
        "matchedSummaryContent": _string(
            "The resume summary, rewritten to strongly align with the key requirements and keywords "
            "from the job description.",
            maxLength=2000,
        ),
        "educationData": {
            "type": "array",
            "items": _object(
                {
                    "degree": _string("Degree obtained (e.g., Bachelor's, Master's, PhD)."),
                    "institution": _string("Name of the educational institution."),
                    "startDate": _string("Start date of education (e.g., YYYY-MM, YYYY)."),
                    "endDate": _string("End date of education (e.g., YYYY-MM, YYYY, or 'Present')."),
                    "isPresent": {"type": "boolean", "description": "True if currently studying here."},
                    "description": _string("Description of education, potentially tailored to the job."),
                    "relevance": _relevance("education"),
                    "comment": _string("How this education matches the job requirements."),
                },
                required=["degree", "institution"],
            ),
        },
        "matchedExperience": {
            "type": "array",
            "items": _object(
                {
                    "position": _string("Job title (e.g., Software Engineer)."),
                    "company": _string("Company name."),
                    "startDate": _string("Start date of employment (e.g., YYYY-MM, YYYY)."),
                    "endDate": _string("End date of employment (e.g., YYYY-MM, YYYY, or 'Present')."),
                    "isPresent": {"type": "boolean", "description": "True if currently working here."},
                    "description": _string(
                        "Responsibilities and achievements, tailored to highlight relevance to the job description."
                    ),
                    "relevance": _relevance("experience"),
                    "comment": _string("How this experience matches the job requirements."),
                },
                required=["position", "company", "description"],
            ),
        },
        "matchedSkills": {
            "type": "array",
            "items": _object(
                {
                    "skill": _string("Name of the skill (e.g., JavaScript, Project Management)."),
                    "relevance": _relevance("skill"),
                    "comment": _string("Importance of this skill for the job."),
                },
                required=["skill"],
            ),
        },
        "matchedProjects": {
            "type": "array",
            "items": _object(
                {
                    "title": _string("Name of the project."),
                    "role": _string("Role in the project."),
                    "startDate": _string("Start date of the project (e.g., YYYY-MM, YYYY)."),
                    "endDate": _string("End date of the project (e.g., YYYY-MM, YYYY, or 'Ongoing')."),
                    "isPresent": {"type": "boolean", "description": "True if the project is ongoing."},
                    "description": _string("Project description emphasizing aspects relevant to the job."),
                    "url": _string("URL/link to the project if available."),
                    "relevance": _relevance("project"),
                    "comment": _string("How this project showcases skills relevant to the job."),
                },
                required=["title", "description"],
            ),
        },
        "matchedCertifications": {
            "type": "array",
            "items": _object(
                {
                    "name": _string("Name of the certification."),
                    "issuer": _string("Issuing organization."),
                    "date": _string("Date obtained (e.g., YYYY-MM, YYYY)."),
                    "url": _string("URL to the certificate if available."),
                    "relevance": _relevance("certification"),
                    "comment": _string("Significance of this certification for the role."),
                },
                required=["name", "issuer"],
            ),
        },
        "matchedLanguages": {
            "type": "array",
            "items": _object(
                {
                    "language": _string("Name of the language spoken."),
                    "proficiency": _string("Proficiency level (e.g., Native, Fluent, Conversational)."),
                    "relevance": _relevance("language"),
                    "comment": _string("Whether the language is a requirement or an asset for the job."),
                },
                required=["language", "proficiency"],
            ),
        },
        "additionalInfoData": _object(
            {
                "interests": _string("Summary of interests from CV."),
                "achievements": _string("Summary of other achievements or awards from CV."),
                "publications": _string("Summary of publications from CV, if any and relevant."),
                "references": _string("Statement about references (e.g., 'Available upon request')."),
            }
        ),
        "customFieldsData": {
            "type": "array",
            "items": _object(
                {
                    "label": _string("The label of the custom field (e.g., Portfolio, GitHub)."),
                    "value": _string("The value of the custom field (e.g., URL, username)."),
                },
                required=["label", "value"],
            ),
        },
    },
    required=[
        "personalInfoData",
        "matchedSummaryContent",
        "educationData",
        "matchedExperience",
        "matchedSkills",
        "matchedProjects",
        "matchedCertifications",
        "matchedLanguages",
    ],
)


RESUME_TIPS_SCHEMA: Dict[str, Any] = _object(
    {
        "personalInformationTips": _tips_section(
            "personal information",
            _object(
                {"name": _string(), "email": _string(), "phone": _string()},
                required=["name", "email", "phone"],
            ),
        ),
        "summaryTips": _tips_section(
            "summary",
            _object(
                {
                    "title": _string("Example title (e.g., Frontend Developer)."),
                    "description": _string("Example summary content."),
                },
                required=["title", "description"],
            ),
        ),
        "experienceTips": _tips_section(
            "experience",
            _object(
                {
                    "title": _string("Example job title for an experience entry."),
                    "description": _string("Example responsibilities and achievements."),
                },
                required=["title", "description"],
            ),
        ),
        "educationTips": _tips_section("education", _string("Example of an education entry.")),
        "skillTips": _tips_section("skills", _string("Example of skills.")),
        "projectTips": _tips_section("projects", _string("Example of a project entry.")),
        "certificationTips": _tips_section("certifications", _string("Example of a certification.")),
        "languagesTips": _tips_section("languages", _string("Example of languages.")),
        "activitiesTips": _tips_section("activities", _string("Example of an activity.")),
        "additionalInformationTips": _tips_section(
            "additional information",
            _object(
                {
                    "interests": _string_list("Example of interests."),
                    "achievements": _string_list("Example of achievements."),
                    "publications": _string_list("Example of publications."),
                    "references": _object(
                        {
                            "name": _string(),
                            "position": _string(),
                            "company": _string(),
                            "email": _string(),
                            "phone": _string(),
                            "relationship": _string(),
                        },
                        required=["name", "position", "company", "email"],
                    ),
                },
                required=["interests", "achievements"],
            ),
        ),
        "customFieldsTips": _tips_section("custom fields", _string("Example of a custom field entry.")),
    },
    required=[
        "personalInformationTips",
        "summaryTips",
        "experienceTips",
        "educationTips",
        "skillTips",
        "projectTips",
        "certificationTips",
        "languagesTips",
        "activitiesTips",
        "additionalInformationTips",
        "customFieldsTips",
    ],
)


CHATBOT_SCHEMA: Dict[str, Any] = _object(
    {
        "outputMessage": _string("The message to be shown to the user"),
        "actionRequired": _string("Any action required from the user", nullable=True),
        "currentTask": _string("The current task being handled"),
    },
    required=["outputMessage", "currentTask"],
)


INTENT_SCHEMA: Dict[str, Any] = _object(
    {
        "intent": _string("Short snake_case label describing what the user wants"),
        "confidence": {"type": "number", "description": "Confidence between 0 and 1"},
        "taskName": _string("One of the available task names, or GENERAL"),
    },
    required=["intent", "confidence", "taskName"],
)
