"""
Canned content returned when the model call fails.

Every builder returns a value of the same shape as the real result, so callers
never need to distinguish the two paths.
"""

from datetime import date, timedelta
from typing import List, Optional

from ..models.ai import (
    DraftScheduleDay,
    DraftSubtopic,
    DraftTopic,
    GeneratedCard,
    QuizQuestion,
    SessionAnalysis,
    StudyPlanDraft,
    SummaryOptions,
)

CHAT_ERROR_REPLY = (
    "I'm sorry, I encountered an error processing your request. The AI service might be "
    "temporarily unavailable. Please try again later."
)
STUDY_HELP_ERROR_REPLY = (
    "I'm sorry, I encountered an error processing your study request. The AI service might be "
    "temporarily unavailable. Please try again later."
)
ANALYSIS_ERROR_REPLY = (
    "I'm sorry, I encountered an error analyzing this text. The AI service might be "
    "temporarily unavailable. Please try again later."
)
TUTOR_ERROR_REPLY = "I'm having trouble connecting to my knowledge base right now. Please try again in a moment."

DEFAULT_FLASHCARDS = [
    ("What is the study of living organisms called?", "Biology"),
    ("What is the formula for the area of a circle?", "A = πr²"),
    ("Who wrote 'Romeo and Juliet'?", "William Shakespeare"),
    ("What is the capital of France?", "Paris"),
    ("What is the chemical symbol for gold?", "Au"),
]

# (question template, options, correct answer, explanation)
_QUIZ_TEMPLATES = [
    ("What is the main focus of {topic}?",
     ["Understanding basic concepts", "Advanced theory application", "Historical development", "Modern innovations"],
     "Understanding basic concepts", "The primary focus is on building a foundation of basic concepts."),
    ("Which of the following best describes {topic}?",
     ["A theoretical framework", "A practical methodology", "A historical movement", "A recent discovery"],
     "A theoretical framework", "It provides a structured way to understand related concepts."),
    ("Who is credited with making significant contributions to {topic}?",
     ["Albert Einstein", "Isaac Newton", "Marie Curie", "Charles Darwin"],
     "Isaac Newton", "Newton's work established many of the fundamental principles."),
    ("Which concept is NOT directly related to {topic}?",
     ["Energy conservation", "Quantum mechanics", "Cellular biology", "Thermodynamics"],
     "Cellular biology", "Cellular biology belongs to life sciences rather than physical sciences."),
    ("What is a practical application of {topic}?",
     ["Medical diagnosis", "Environmental monitoring", "Space exploration", "All of the above"],
     "All of the above", "The principles can be applied across medicine, the environment and space exploration."),
    ("In what century did {topic} gain significant recognition?",
     ["17th century", "18th century", "19th century", "20th century"],
     "20th century", "Most developments in this field occurred during the 20th century."),
    ("Which of these institutions is well-known for research in {topic}?",
     ["Harvard University", "Massachusetts Institute of Technology", "Stanford University", "All of the above"],
     "All of the above", "All these institutions have contributed significantly to research in this field."),
    ("What is considered the foundational text on {topic}?",
     ["Principia Mathematica", "The Origin of Species", "The Structure of Scientific Revolutions", "A Brief History of Time"],
     "The Structure of Scientific Revolutions", "This work established many core concepts that still influence the field."),
    ("Which field is most closely related to {topic}?",
     ["Mathematics", "Philosophy", "Computer Science", "Psychology"],
     "Philosophy", "There are strong conceptual links between this topic and philosophical inquiry."),
    ("What recent development has most impacted {topic}?",
     ["Artificial intelligence", "Quantum computing", "Big data analytics", "Blockchain technology"],
     "Artificial intelligence", "AI has changed approaches and applications in this field."),
    ("Which challenge is {topic} most likely to help address?",
     ["Climate change", "Healthcare inequities", "Educational access", "Food security"],
     "Healthcare inequities", "Applications in this field can improve healthcare access and outcomes."),
    ("What ethical consideration is most relevant to {topic}?",
     ["Privacy concerns", "Economic displacement", "Inherent biases", "Environmental impact"],
     "Privacy concerns", "Issues around privacy are central to ethical discussions in this field."),
    ("How might {topic} evolve in the next decade?",
     ["Greater integration with daily life", "More specialized applications", "Decreased relevance", "Regulatory restrictions"],
     "Greater integration with daily life", "Current trends suggest increasing integration into everyday experiences."),
    ("Which discipline provides the theoretical foundation for {topic}?",
     ["Physics", "Biology", "Economics", "Computer Science"],
     "Computer Science", "The computational framework provides the essential theoretical underpinnings."),
    ("What skill is most valuable for someone studying {topic}?",
     ["Mathematical reasoning", "Creative thinking", "Technical writing", "Public speaking"],
     "Mathematical reasoning", "Strong mathematical skills are essential for advanced work in this field."),
    ("Which country is currently leading research in {topic}?",
     ["United States", "China", "Germany", "Japan"],
     "United States", "The United States continues to lead in research output in this area."),
    ("What is the most common misconception about {topic}?",
     ["It's too complex for practical use", "It's only relevant to specialists", "It's a recent development", "It's primarily theoretical"],
     "It's only relevant to specialists", "The applications extend far beyond specialist domains."),
    ("How has social media influenced the development of {topic}?",
     ["Accelerated information sharing", "Created echo chambers", "Slowed progress", "Had minimal impact"],
     "Accelerated information sharing", "Social media has increased the speed at which new developments are shared."),
    ("Which learning approach is most effective for mastering {topic}?",
     ["Theoretical study", "Hands-on projects", "Group discussion", "Individual research"],
     "Hands-on projects", "Practical application through projects typically leads to the deepest understanding."),
    ("What funding source has most significantly advanced {topic}?",
     ["Government grants", "Private industry", "Academic institutions", "Nonprofit organizations"],
     "Government grants", "Government funding has supported foundational research in this area."),
]

DEFAULT_RECOMMENDATIONS = [
    "Focus on completing one topic at a time rather than working on multiple topics simultaneously.",
    "Use active recall techniques instead of passive reading for better retention.",
    "Take regular breaks using the Pomodoro technique (25 min study, 5 min break).",
    "Review completed topics periodically to strengthen your memory.",
    "Prioritize high-priority topics that are foundational for other subjects.",
]


def fallback_flashcards(count: int = 5) -> List[GeneratedCard]:
    count = max(0, count)
    return [GeneratedCard(question=q, answer=a) for q, a in DEFAULT_FLASHCARDS[:count]]


def fallback_quiz(topic: str, count: int) -> List[QuizQuestion]:
    """Exactly count questions, cycling through the templates when more are needed."""
    questions = []
    for i in range(max(0, count)):
        question, options, answer, explanation = _QUIZ_TEMPLATES[i % len(_QUIZ_TEMPLATES)]
        questions.append(QuizQuestion(
            question=question.format(topic=topic),
            options=list(options),
            correct_answer=answer,
            explanation=explanation,
        ))
    return questions


def fallback_summary(text: str, options: SummaryOptions) -> str:
    word_count = len(text.split())

    if options.style == "bullets":
        points = [
            "The text discusses important concepts related to the topic.",
            "Key arguments are presented with supporting evidence.",
            "The author concludes by synthesizing the main points.",
        ]
        if options.length == "short":
            return "• " + points[0]
        if options.length == "medium":
            return "• " + "\n• ".join(points[:2])
        return "• " + "\n• ".join(points)

    detail = "concisely" if options.style == "concise" else "in detail"
    summary = f"This {word_count}-word text {detail} discusses the main topics presented. "
    summary += "The author introduces several key concepts and supports them with evidence. "
    if options.length != "short":
        summary += "Various perspectives are considered throughout the discussion, providing a balanced view. "
    if options.length == "long":
        summary += "The significance of these ideas is explored through multiple examples and applications. "
        summary += "Connections are drawn between different aspects of the subject matter. "
    summary += "In conclusion, the text effectively communicates its central message while addressing potential counterarguments."
    return summary


def fallback_session_analysis(duration: int) -> SessionAnalysis:
    return SessionAnalysis(
        strengths=[f"You completed a {duration}-minute focused study session."],
        improvements=["Write a short summary of what you covered right after each session."],
        next_steps=[
            "Review today's material again within 24 hours.",
            "Test yourself with a few practice questions on this task.",
        ],
        is_fallback=True,
    )


def fallback_study_plan(today: Optional[date] = None) -> StudyPlanDraft:
    today = today or date.today()
    topics = [
        DraftTopic(
            title="Mathematics Foundations",
            description="Core mathematical concepts required for the course",
            duration=4, priority="high",
            subtopics=[DraftSubtopic(title="Algebra Fundamentals", duration=60),
                       DraftSubtopic(title="Calculus Basics", duration=90),
                       DraftSubtopic(title="Probability Theory", duration=60)],
        ),
        DraftTopic(
            title="Physics Principles",
            description="Essential physics concepts and formulas",
            duration=3, priority="medium",
            subtopics=[DraftSubtopic(title="Classical Mechanics", duration=60),
                       DraftSubtopic(title="Electricity and Magnetism", duration=60),
                       DraftSubtopic(title="Modern Physics", duration=60)],
        ),
        DraftTopic(
            title="Computer Science Fundamentals",
            description="Core computer science topics and programming concepts",
            duration=5, priority="high",
            subtopics=[DraftSubtopic(title="Data Structures", duration=90),
                       DraftSubtopic(title="Algorithms", duration=90),
                       DraftSubtopic(title="Object-Oriented Programming", duration=60),
                       DraftSubtopic(title="Database Fundamentals", duration=60)],
        ),
    ]
    schedule = [
        DraftScheduleDay(date=today + timedelta(days=i), topics=[topics[i % 3].title])
        for i in range(7)
    ]
    return StudyPlanDraft(
        topics=topics,
        schedule=schedule,
        recommendations=[
            "Break down complex topics into smaller, manageable subtopics",
            "Use active recall techniques rather than passive reading",
            "Schedule regular review sessions to reinforce learning",
            "Focus on understanding concepts rather than memorizing facts",
            "Take breaks using the Pomodoro technique (25 min study, 5 min break)",
        ],
        is_fallback=True,
    )


def fallback_ideas(node_text: str) -> List[str]:
    return [
        f'Related concept to "{node_text}"',
        f'Subtopic of "{node_text}"',
        f'Example of "{node_text}"',
        f'Application of "{node_text}"',
        f'Implication of "{node_text}"',
    ]
