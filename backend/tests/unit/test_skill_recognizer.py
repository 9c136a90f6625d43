"""
技能识别器单元测试
"""

from resume_analyzer.extraction.skill_recognizer import (
    SKILL_PATTERNS,
    recognize_skills,
    recognize_skills_by_category,
)


class TestRecognizeSkills:
    """测试技能识别"""

    def test_case_insensitive_and_deduplicated(self):
        """测试：大小写不敏感且去重"""
        assert recognize_skills("Python python PYTHON") == {"python"}

    def test_empty_input(self):
        """测试：空输入返回空集合"""
        assert recognize_skills("") == set()

    def test_whole_word_only(self):
        """测试：只匹配完整单词"""
        skills = recognize_skills("Pythonic code and JavaScripting and Reactive streams")
        assert "python" not in skills
        assert "javascript" not in skills
        assert "react" not in skills

    def test_symbol_terms(self):
        """测试：C++、C#、Node.js、ASP.NET 能被识别"""
        skills = recognize_skills("Worked with C++, C# and Node.js on ASP.NET services")
        assert {"c++", "c#", "node.js", "asp.net"} <= skills

    def test_multi_word_terms(self):
        """测试：多词术语"""
        skills = recognize_skills("Strong Problem Solving skills, hosted on Google Cloud")
        assert "problem solving" in skills
        assert "google cloud" in skills

    def test_longer_term_preferred_within_group(self):
        """测试：同组内较长术语优先，语言组仍单独识别 SQL"""
        skills = recognize_skills("Administered SQL Server clusters")
        assert "sql server" in skills
        assert "sql" in skills

    def test_duplicate_across_groups_collapses(self):
        """测试：跨分类重复的术语合并为一个"""
        by_category = recognize_skills_by_category("Firebase hosting")
        assert "firebase" in by_category["databases"]
        assert "firebase" in by_category["cloud"]
        assert recognize_skills("Firebase hosting") == {"firebase"}

    def test_resume_text(self, resume_text):
        """测试：典型简历文本"""
        skills = recognize_skills(resume_text)
        assert {"python", "django", "aws", "docker", "postgresql", "agile"} <= skills


class TestSkillPatterns:
    """测试模式列表"""

    def test_ordered_categories(self):
        """测试：分类顺序固定"""
        assert [category for category, _ in SKILL_PATTERNS] == [
            "languages", "frameworks", "databases", "cloud", "tools", "soft_skills"
        ]

    def test_by_category_only_includes_hits(self):
        """测试：只返回有命中的分类"""
        by_category = recognize_skills_by_category("Leadership and Jira")
        assert set(by_category) == {"soft_skills", "tools"}
