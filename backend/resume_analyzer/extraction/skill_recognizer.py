"""
技能识别器

基于正则的字面匹配：一个技能被识别当且仅当它以完整单词形式（不区分大小写）出现在文本中。
不做词干化，不做同义词归并。输出统一小写并去重。
"""

import re
from typing import Dict, Iterable, Pattern, Set, Tuple

# 分类 -> 已知术语（有序）
SKILL_TERMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("languages", (
        "JavaScript", "Python", "Java", "C++", "C#", "PHP", "Ruby", "Go", "Rust",
        "Swift", "Kotlin", "TypeScript", "HTML", "CSS", "SQL", "R", "MATLAB",
        "Scala", "Perl", "Shell", "Bash",
    )),
    ("frameworks", (
        "React", "Angular", "Vue", "Node.js", "Express", "Django", "Flask",
        "Spring", "Laravel", "ASP.NET", "jQuery", "Bootstrap", "Tailwind",
        "Sass", "Less", "Webpack", "Babel", "Jest", "Mocha", "Chai",
    )),
    ("databases", (
        "MongoDB", "MySQL", "PostgreSQL", "SQLite", "Redis", "Oracle",
        "SQL Server", "Firebase", "DynamoDB", "Cassandra", "Elasticsearch",
    )),
    ("cloud", (
        "AWS", "Azure", "Google Cloud", "Heroku", "DigitalOcean", "Vercel",
        "Netlify", "Firebase", "Docker", "Kubernetes",
    )),
    ("tools", (
        "Git", "GitHub", "GitLab", "Bitbucket", "Jenkins", "Travis CI",
        "CircleCI", "Jira", "Confluence", "Slack", "Trello", "Asana", "Figma",
        "Sketch", "Adobe", "Photoshop", "Illustrator",
    )),
    ("soft_skills", (
        "Leadership", "Communication", "Teamwork", "Problem Solving",
        "Critical Thinking", "Time Management", "Adaptability", "Creativity",
        "Collaboration", "Project Management", "Agile", "Scrum", "Kanban",
    )),
)


def compile_skill_pattern(terms: Iterable[str]) -> Pattern:
    """
    将术语列表编译为不区分大小写的整词交替模式

    较长的术语排在前面，"SQL Server" 优先于 "SQL"；
    用环视代替 \\b，使 "C++"、"C#" 这类以符号结尾的术语也能整词匹配。
    """
    alternation = "|".join(
        re.escape(term) for term in sorted(terms, key=len, reverse=True)
    )
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


# 有序的 (分类, 模式) 列表，模块加载时编译一次
SKILL_PATTERNS: Tuple[Tuple[str, Pattern], ...] = tuple(
    (category, compile_skill_pattern(terms)) for category, terms in SKILL_TERMS
)


def recognize_skills_by_category(text: str) -> Dict[str, Set[str]]:
    """
    按分类识别技能

    Returns:
        分类 -> 小写技能集合，只包含有命中的分类
    """
    result: Dict[str, Set[str]] = {}
    if not text:
        return result

    for category, pattern in SKILL_PATTERNS:
        matches = {match.group(0).lower() for match in pattern.finditer(text)}
        if matches:
            result[category] = matches
    return result


def recognize_skills(text: str) -> Set[str]:
    """
    识别文本中的技能

    Args:
        text: 规范化后的文本

    Returns:
        去重后的小写技能集合，空输入返回空集合
    """
    skills: Set[str] = set()
    for matches in recognize_skills_by_category(text).values():
        skills |= matches
    return skills
