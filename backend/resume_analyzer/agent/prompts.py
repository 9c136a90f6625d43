# Prompt templates

# ============================================================
# 截断长度：只发送文本前缀，截断是静默且确定的
# ============================================================

ANALYSIS_TEXT_LIMIT = 3000
BULLET_POINTS_TEXT_LIMIT = 2000

# ============================================================
# 简历全量分析 (temperature 0.3)
# ============================================================

ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert resume analyst and career advisor. "
    "Analyze resumes objectively and provide actionable insights."
)

ANALYSIS_PROMPT_TEMPLATE = """
Please analyze the following resume for a {target_job} position and provide a comprehensive analysis in JSON format.

Resume Text:
{resume_text}

Please provide the analysis in the following JSON structure:

{{
  "strengths": [
    {{
      "skill": "skill name",
      "confidence": 0.85,
      "description": "brief description of why this is a strength"
    }}
  ],
  "missingSkills": [
    {{
      "skill": "skill name",
      "importance": "high|medium|low",
      "suggestion": "how to acquire or improve this skill"
    }}
  ],
  "skillMatch": {{
    "targetJob": "{target_job}",
    "matchPercentage": 75,
    "matchedSkills": ["skill1", "skill2"],
    "missingSkills": ["skill3", "skill4"]
  }},
  "suggestions": [
    {{
      "category": "content|format|skills",
      "title": "suggestion title",
      "description": "detailed suggestion",
      "priority": "high|medium|low"
    }}
  ],
  "bulletPoints": [
    {{
      "category": "experience|skills|achievements",
      "points": [
        "Improved system performance by 40% through optimization",
        "Led team of 5 developers in agile environment"
      ]
    }}
  ]
}}

Focus on:
1. Technical skills relevant to {target_job}
2. Quantifiable achievements
3. Leadership and soft skills
4. Areas for improvement
5. Actionable suggestions

Return only valid JSON, no explanations.
"""

# ============================================================
# 要点生成 (temperature 0.4)
# ============================================================

BULLET_POINTS_SYSTEM_PROMPT = (
    "You are an expert resume writer. "
    "Generate compelling bullet points that highlight achievements and impact."
)

BULLET_POINTS_PROMPT_TEMPLATE = """
Based on the following resume text, generate 5-8 strong bullet points for the {category} section:

{resume_text}

Requirements:
- Use action verbs
- Include quantifiable results when possible
- Focus on achievements and impact
- Keep each point concise but impactful
- Format as a JSON array of strings

Return only the JSON array of bullet points.
"""

# ============================================================
# 技能匹配 (temperature 0.2)
# ============================================================

SKILL_MATCH_SYSTEM_PROMPT = "You are an expert in skill matching and job analysis."

SKILL_MATCH_PROMPT_TEMPLATE = """
Calculate the skill match percentage between the candidate's skills and the required skills for a {target_job} position.

Candidate Skills: {candidate_skills}

Required Skills for {target_job}: {required_skills}

Provide the analysis in JSON format:
{{
  "matchPercentage": 75,
  "matchedSkills": ["skill1", "skill2"],
  "missingSkills": ["skill3", "skill4"],
  "explanation": "brief explanation of the match"
}}
"""

# ============================================================
# 岗位默认技能表：本地识别的技能与之比对，未知岗位回落到 Software Engineer
# ============================================================

DEFAULT_ROLE = "Software Engineer"

DEFAULT_SKILLS_BY_ROLE = {
    "Software Engineer": ["JavaScript", "Python", "React", "Node.js", "Git", "SQL", "REST APIs"],
    "Frontend Developer": ["JavaScript", "React", "HTML", "CSS", "TypeScript", "Git", "Responsive Design"],
    "Backend Developer": ["Python", "Node.js", "SQL", "MongoDB", "REST APIs", "Git", "Docker"],
    "Data Scientist": ["Python", "R", "SQL", "Machine Learning", "Statistics", "Pandas", "NumPy"],
    "DevOps Engineer": ["Docker", "Kubernetes", "AWS", "Linux", "CI/CD", "Git", "Monitoring"],
    "Product Manager": ["Product Strategy", "User Research", "Agile", "Data Analysis", "Communication", "Leadership"],
    "UX Designer": ["User Research", "Figma", "Prototyping", "User Testing", "Design Systems", "Wireframing"],
}


def truncate_text(text: str, limit: int) -> str:
    """取文本前 limit 个字符，被截断时追加省略号"""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def get_default_skills_for_role(target_job: str) -> list:
    """岗位默认技能列表"""
    return DEFAULT_SKILLS_BY_ROLE.get(target_job, DEFAULT_SKILLS_BY_ROLE[DEFAULT_ROLE])
