"""
Built-in content: demo notes for first-time users, note templates and
mind-map templates.
"""

from typing import Dict, List, Sequence, Tuple

from ..models.mindmap import MindMapLink, MindMapNode, MindMapTemplate
from ..models.note import NoteTemplate, SmartNote

TEMPLATE_MAIN_COLOR = "#4338CA"
TEMPLATE_SUB_COLOR = "#047857"
TEMPLATE_LEAF_COLOR = "#B45309"

_TYPE_COLORS = {"main": TEMPLATE_MAIN_COLOR, "sub": TEMPLATE_SUB_COLOR, "leaf": TEMPLATE_LEAF_COLOR}


# --- Demo notes ---

_DEMO_NOTES = [
    {
        "id": "1",
        "title": "Introduction to Quantum Computing",
        "content": (
            "<h2>Quantum Computing Fundamentals</h2><p>Quantum computing is an emerging field that utilizes "
            "quantum mechanics to perform computations. Unlike classical bits, quantum bits or qubits can exist "
            "in multiple states simultaneously due to superposition.</p><h3>Key Concepts</h3><ul>"
            "<li>Superposition</li><li>Entanglement</li><li>Quantum Gates</li></ul>"
        ),
        "tags": ["quantum", "computing", "physics"],
        "category": "lecture",
        "createdAt": "2023-03-15T10:30:00Z",
        "updatedAt": "2023-03-15T11:45:00Z",
        "isPinned": True,
        "color": "blue",
        "aiSummary": (
            "An overview of quantum computing fundamentals including superposition, entanglement, "
            "and quantum gates."
        ),
        "aiKeyInsights": [
            "Quantum computers use qubits instead of classical bits",
            "Superposition allows qubits to be in multiple states simultaneously",
            "Quantum entanglement enables correlated measurements across distances",
        ],
        "aiTopics": ["Quantum Mechanics", "Computing Theory", "Qubits", "Quantum Gates"],
    },
    {
        "id": "2",
        "title": "Neural Networks Architecture",
        "content": (
            "<h2>Understanding Neural Networks</h2><p>Neural networks are computational models inspired by the "
            "human brain. They consist of layers of neurons that process and transform input data to produce "
            "meaningful output.</p><h3>Network Layers</h3><ul><li>Input Layer</li><li>Hidden Layers</li>"
            "<li>Output Layer</li></ul><p>Each connection between neurons has a weight that is adjusted during "
            "training.</p>"
        ),
        "tags": ["ai", "machine learning", "neural networks"],
        "category": "research",
        "createdAt": "2023-03-10T14:20:00Z",
        "updatedAt": "2023-03-12T09:15:00Z",
        "color": "purple",
    },
    {
        "id": "3",
        "title": "Calculus II Exam Review",
        "content": (
            "<h2>Integration Techniques</h2><p>This review covers advanced integration techniques that will be on "
            "the upcoming exam.</p><h3>Topics to Review</h3><ul><li>Integration by Parts</li>"
            "<li>Trigonometric Substitution</li><li>Partial Fractions</li></ul><p><strong>Remember:</strong> "
            "Practice multiple examples of each type.</p>"
        ),
        "tags": ["calculus", "integration", "exam prep"],
        "category": "exam",
        "createdAt": "2023-03-05T16:45:00Z",
        "updatedAt": "2023-03-14T20:30:00Z",
        "isPinned": True,
        "color": "red",
    },
    {
        "id": "4",
        "title": "Research Paper Structure",
        "content": (
            "<h2>Academic Research Paper Format</h2><p>A standard research paper follows a specific structure to "
            "effectively communicate findings.</p><h3>Paper Sections</h3><ol><li>Abstract</li><li>Introduction</li>"
            "<li>Literature Review</li><li>Methodology</li><li>Results</li><li>Discussion</li><li>Conclusion</li>"
            "<li>References</li></ol>"
        ),
        "tags": ["research", "academic writing", "paper"],
        "category": "assignment",
        "createdAt": "2023-02-28T11:20:00Z",
        "updatedAt": "2023-03-01T13:10:00Z",
        "color": "green",
    },
    {
        "id": "5",
        "title": "Mobile App Development Project",
        "content": (
            "<h2>Project Timeline and Requirements</h2><p>Our team project involves developing a cross-platform "
            "mobile application using React Native.</p><h3>Milestones</h3><ul><li>UI/UX Design - Due March 25</li>"
            "<li>Frontend Implementation - Due April 10</li><li>Backend Integration - Due April 25</li>"
            "<li>Testing - Due May 5</li><li>Deployment - Due May 15</li></ul>"
        ),
        "tags": ["project", "mobile", "react native"],
        "category": "project",
        "createdAt": "2023-03-02T09:30:00Z",
        "updatedAt": "2023-03-05T16:20:00Z",
        "color": "amber",
    },
]


def demo_notes() -> List[SmartNote]:
    """Fresh copies of the demo notes (callers mutate them)."""
    return [SmartNote.model_validate(data) for data in _DEMO_NOTES]


# --- Note templates ---

NOTE_TEMPLATES: List[NoteTemplate] = [
    NoteTemplate(
        id="blank", name="Blank Note", description="Start with a clean slate",
        content="", tags=[], category="personal", color="gray",
    ),
    NoteTemplate(
        id="lecture", name="Lecture Notes", description="Structure for academic lectures",
        content="""<h1>Lecture: [Title]</h1>
<p><strong>Date:</strong> [Date]</p>
<p><strong>Course:</strong> [Course]</p>
<p><strong>Instructor:</strong> [Instructor]</p>
<h2>Main Topics</h2>
<ul>
  <li>Topic 1</li>
  <li>Topic 2</li>
  <li>Topic 3</li>
</ul>
<h2>Key Points</h2>
<p>[Notes about important concepts]</p>
<h2>Examples</h2>
<p>[Examples discussed in class]</p>
<h2>Questions</h2>
<ul>
  <li>[Questions to ask or research later]</li>
</ul>
<h2>Action Items</h2>
<ul>
  <li>[ ] Review notes</li>
  <li>[ ] Complete practice problems</li>
  <li>[ ] Research related topics</li>
</ul>""",
        tags=["lecture", "academic"], category="lecture", color="blue",
    ),
    NoteTemplate(
        id="meeting", name="Meeting Notes", description="Organize meeting minutes and action items",
        content="""<h1>Meeting: [Title]</h1>
<p><strong>Date:</strong> [Date]</p>
<p><strong>Attendees:</strong> [Names]</p>
<h2>Agenda</h2>
<ol>
  <li>Item 1</li>
  <li>Item 2</li>
  <li>Item 3</li>
</ol>
<h2>Discussion</h2>
<p>[Summary of key discussions]</p>
<h2>Decisions Made</h2>
<ul>
  <li>[Decision 1]</li>
  <li>[Decision 2]</li>
</ul>
<h2>Action Items</h2>
<ul>
  <li>[ ] Task 1 - Assigned to: [Name], Due: [Date]</li>
  <li>[ ] Task 2 - Assigned to: [Name], Due: [Date]</li>
</ul>
<h2>Next Meeting</h2>
<p><strong>Date:</strong> [Next meeting date]</p>
<p><strong>Topics:</strong> [Topics for next meeting]</p>""",
        tags=["meeting", "collaboration"], category="personal", color="amber",
    ),
    NoteTemplate(
        id="research", name="Research Notes", description="Template for research findings and analysis",
        content="""<h1>Research Topic: [Title]</h1>
<p><strong>Date:</strong> [Date]</p>
<p><strong>Area:</strong> [Research area]</p>
<h2>Research Questions</h2>
<ul>
  <li>[Question 1]</li>
  <li>[Question 2]</li>
</ul>
<h2>Literature Review</h2>
<p>[Summary of existing research]</p>
<h2>Methodology</h2>
<p>[Research approach]</p>
<h2>Findings</h2>
<p>[Key discoveries]</p>
<h2>Analysis</h2>
<p>[Interpretation of findings]</p>
<h2>References</h2>
<ul>
  <li>[Reference 1]</li>
  <li>[Reference 2]</li>
</ul>""",
        tags=["research", "academic"], category="research", color="purple",
    ),
    NoteTemplate(
        id="exam-prep", name="Exam Preparation", description="Structured format for exam study",
        content="""<h1>Exam Preparation: [Subject]</h1>
<p><strong>Exam Date:</strong> [Date]</p>
<p><strong>Topics Covered:</strong> [List of topics]</p>
<h2>Key Concepts</h2>
<ul>
  <li>Concept 1: [Explanation]</li>
  <li>Concept 2: [Explanation]</li>
</ul>
<h2>Formulas &amp; Definitions</h2>
<ul>
  <li>[Formula 1]</li>
  <li>[Definition 1]</li>
</ul>
<h2>Practice Questions</h2>
<ol>
  <li>Question: [Question text]</li>
  <li>Solution: [Solution steps]</li>
</ol>
<h2>Study Plan</h2>
<ul>
  <li>[ ] Review lecture notes</li>
  <li>[ ] Complete practice problems</li>
  <li>[ ] Review textbook chapters</li>
  <li>[ ] Practice with past exams</li>
</ul>""",
        tags=["exam", "study", "academic"], category="exam", color="red",
    ),
    NoteTemplate(
        id="project", name="Project Plan", description="Organize project goals, tasks and deadlines",
        content="""<h1>Project: [Title]</h1>
<p><strong>Start Date:</strong> [Date]</p>
<p><strong>Due Date:</strong> [Date]</p>
<p><strong>Status:</strong> [Status]</p>
<h2>Project Objective</h2>
<p>[Clear statement of the goal]</p>
<h2>Team Members</h2>
<ul>
  <li>[Name] - [Role]</li>
</ul>
<h2>Milestones</h2>
<ol>
  <li>Phase 1 - [Description] - Due: [Date]</li>
  <li>Phase 2 - [Description] - Due: [Date]</li>
  <li>Phase 3 - [Description] - Due: [Date]</li>
</ol>
<h2>Task Breakdown</h2>
<ul>
  <li>[ ] Task 1 - Assigned to: [Name]</li>
  <li>[ ] Task 2 - Assigned to: [Name]</li>
</ul>
<h2>Resources Needed</h2>
<ul>
  <li>[Resource 1]</li>
  <li>[Resource 2]</li>
</ul>
<h2>Potential Challenges</h2>
<ul>
  <li>[Challenge 1] - Mitigation: [Strategy]</li>
</ul>""",
        tags=["project", "planning"], category="project", color="green",
    ),
]


def get_note_template(template_id: str):
    for template in NOTE_TEMPLATES:
        if template.id == template_id:
            return template
    return None


def search_note_templates(query: str) -> List[NoteTemplate]:
    """Templates whose name, description or tags contain query (case-insensitive)."""
    if not query:
        return list(NOTE_TEMPLATES)
    q = query.lower()
    return [
        t for t in NOTE_TEMPLATES
        if q in t.name.lower() or q in t.description.lower() or any(q in tag.lower() for tag in t.tags)
    ]


# --- Mind-map templates ---

NodeSpec = Tuple[str, str, float, float]  # id, text, x, y


def _mind_map_template(
    template_id: str,
    title: str,
    description: str,
    nodes: Sequence[NodeSpec],
    edges: Sequence[str],
) -> MindMapTemplate:
    """Builds a template; node type follows the id prefix, edges are "source>target"."""
    built = []
    for node_id, text, x, y in nodes:
        node_type = "main" if node_id == "root" else ("sub" if node_id.startswith("sub") else "leaf")
        built.append(MindMapNode(id=node_id, text=text, x=x, y=y, color=_TYPE_COLORS[node_type], type=node_type))
    links = []
    for i, edge in enumerate(edges, start=1):
        source, target = edge.split(">")
        links.append(MindMapLink(id=f"l{i}", source=source, target=target))
    return MindMapTemplate(id=template_id, title=title, description=description, nodes=built, links=links)


MIND_MAP_TEMPLATES: List[MindMapTemplate] = [
    _mind_map_template(
        "study-plan", "Study Plan", "Organize your study schedule and track progress",
        [
            ("root", "Study Plan", 400, 200),
            ("sub1", "Daily Tasks", 200, 300), ("sub2", "Weekly Goals", 400, 300),
            ("sub3", "Monthly Objectives", 600, 300),
            ("leaf1", "Review Previous Notes", 100, 400), ("leaf2", "Complete Practice Problems", 200, 400),
            ("leaf3", "Summarize Key Concepts", 300, 400), ("leaf4", "Master 2 Topics", 400, 400),
            ("leaf5", "Complete Mock Quiz", 500, 400), ("leaf6", "Group Study Session", 600, 400),
            ("leaf7", "Track Progress & Adjust", 700, 400),
            ("sub4", "Resources", 200, 500),
            ("leaf8", "Textbooks", 100, 600), ("leaf9", "Online Courses", 200, 600),
            ("leaf10", "Study Groups", 300, 600),
        ],
        "root>sub1 root>sub2 root>sub3 sub1>leaf1 sub1>leaf2 sub1>leaf3 sub2>leaf4 sub2>leaf5 "
        "sub3>leaf6 sub3>leaf7 root>sub4 sub4>leaf8 sub4>leaf9 sub4>leaf10".split(),
    ),
    _mind_map_template(
        "research-paper", "Research Paper", "Structure your research paper ideas and findings",
        [
            ("root", "Research Paper", 400, 200),
            ("sub1", "Introduction", 200, 300), ("sub2", "Methodology", 400, 300),
            ("sub3", "Results & Discussion", 600, 300), ("sub4", "Literature Review", 200, 400),
            ("leaf1", "Thesis Statement", 100, 350), ("leaf2", "Research Problem", 150, 400),
            ("leaf3", "Significance", 300, 350),
            ("leaf4", "Data Collection", 350, 400), ("leaf5", "Analysis Approach", 400, 450),
            ("leaf6", "Research Design", 450, 400),
            ("leaf7", "Key Findings", 550, 400), ("leaf8", "Interpretation", 600, 450),
            ("leaf9", "Limitations", 650, 400),
            ("leaf10", "Historical Context", 150, 450), ("leaf11", "Current Theories", 200, 500),
            ("leaf12", "Gaps in Research", 250, 450),
            ("sub5", "Conclusion", 400, 550),
            ("leaf13", "Summary", 350, 600), ("leaf14", "Implications", 400, 650),
            ("leaf15", "Future Research", 450, 600),
        ],
        "root>sub1 root>sub2 root>sub3 root>sub4 sub1>leaf1 sub1>leaf2 sub1>leaf3 sub2>leaf4 sub2>leaf5 "
        "sub2>leaf6 sub3>leaf7 sub3>leaf8 sub3>leaf9 sub4>leaf10 sub4>leaf11 sub4>leaf12 root>sub5 "
        "sub5>leaf13 sub5>leaf14 sub5>leaf15".split(),
    ),
    _mind_map_template(
        "course-concepts", "Course Concepts", "Map out the key concepts from a course or subject",
        [
            ("root", "Course Name", 400, 200),
            ("sub1", "Unit 1", 200, 300), ("sub2", "Unit 2", 400, 300), ("sub3", "Unit 3", 600, 300),
            ("leaf1", "Key Concept 1.1", 150, 380), ("leaf2", "Key Concept 1.2", 200, 420),
            ("leaf3", "Key Concept 1.3", 250, 380),
            ("leaf4", "Key Concept 2.1", 350, 380), ("leaf5", "Key Concept 2.2", 400, 420),
            ("leaf6", "Key Concept 2.3", 450, 380),
            ("leaf7", "Key Concept 3.1", 550, 380), ("leaf8", "Key Concept 3.2", 600, 420),
            ("leaf9", "Key Concept 3.3", 650, 380),
            ("sub4", "Resources", 300, 500), ("sub5", "Assignments", 500, 500),
            ("leaf10", "Textbooks", 250, 580), ("leaf11", "Online Lectures", 300, 600),
            ("leaf12", "Study Groups", 350, 580),
            ("leaf13", "Papers", 450, 580), ("leaf14", "Projects", 500, 600), ("leaf15", "Exams", 550, 580),
        ],
        "root>sub1 root>sub2 root>sub3 sub1>leaf1 sub1>leaf2 sub1>leaf3 sub2>leaf4 sub2>leaf5 sub2>leaf6 "
        "sub3>leaf7 sub3>leaf8 sub3>leaf9 root>sub4 root>sub5 sub4>leaf10 sub4>leaf11 sub4>leaf12 "
        "sub5>leaf13 sub5>leaf14 sub5>leaf15".split(),
    ),
    _mind_map_template(
        "project-planning", "Project Planning", "Organize project tasks, milestones, and resources",
        [
            ("root", "Project Plan", 400, 200),
            ("sub1", "Project Phases", 250, 300), ("sub2", "Resources", 400, 300), ("sub3", "Timeline", 550, 300),
            ("leaf1", "Planning", 150, 370), ("leaf2", "Research", 200, 400), ("leaf3", "Development", 250, 430),
            ("leaf4", "Testing", 300, 400), ("leaf5", "Deployment", 350, 370),
            ("leaf6", "Team Members", 350, 400), ("leaf7", "Budget", 400, 430), ("leaf8", "Tools", 450, 400),
            ("leaf9", "Start Date", 500, 370), ("leaf10", "Milestones", 550, 400), ("leaf11", "Deadlines", 600, 370),
            ("sub4", "Stakeholders", 250, 500), ("sub5", "Risks & Challenges", 550, 500),
            ("leaf12", "Client", 200, 570), ("leaf13", "Team", 250, 600), ("leaf14", "Managers", 300, 570),
            ("leaf15", "Technical Issues", 500, 570), ("leaf16", "Resource Constraints", 550, 600),
            ("leaf17", "Schedule Delays", 600, 570),
        ],
        "root>sub1 root>sub2 root>sub3 sub1>leaf1 sub1>leaf2 sub1>leaf3 sub1>leaf4 sub1>leaf5 sub2>leaf6 "
        "sub2>leaf7 sub2>leaf8 sub3>leaf9 sub3>leaf10 sub3>leaf11 root>sub4 root>sub5 sub4>leaf12 "
        "sub4>leaf13 sub4>leaf14 sub5>leaf15 sub5>leaf16 sub5>leaf17".split(),
    ),
    _mind_map_template(
        "essay-outline", "Essay Outline", "Create a structured outline for your essay or paper",
        [
            ("root", "Essay Topic", 400, 200),
            ("sub1", "Introduction", 200, 300), ("sub2", "Body Paragraphs", 400, 300), ("sub3", "Conclusion", 600, 300),
            ("leaf1", "Hook/Attention Grabber", 120, 380), ("leaf2", "Background Information", 200, 420),
            ("leaf3", "Thesis Statement", 280, 380),
            ("leaf4", "Topic Sentence 1", 320, 380), ("leaf5", "Supporting Evidence", 400, 420),
            ("leaf6", "Analysis", 400, 460), ("leaf7", "Topic Sentence 2", 400, 500),
            ("leaf8", "Topic Sentence 3", 480, 380),
            ("leaf9", "Restate Thesis", 520, 380), ("leaf10", "Summarize Key Points", 600, 420),
            ("leaf11", "Final Thought/Call to Action", 680, 380),
            ("sub4", "Research & Sources", 200, 550), ("sub5", "Revision Strategy", 600, 550),
            ("leaf12", "Primary Sources", 150, 620), ("leaf13", "Secondary Sources", 200, 660),
            ("leaf14", "Citation Format", 250, 620),
            ("leaf15", "Content Check", 550, 620), ("leaf16", "Structure Review", 600, 660),
            ("leaf17", "Grammar & Style", 650, 620),
        ],
        "root>sub1 root>sub2 root>sub3 sub1>leaf1 sub1>leaf2 sub1>leaf3 sub2>leaf4 sub2>leaf5 sub2>leaf6 "
        "sub2>leaf7 sub2>leaf8 sub3>leaf9 sub3>leaf10 sub3>leaf11 root>sub4 root>sub5 sub4>leaf12 "
        "sub4>leaf13 sub4>leaf14 sub5>leaf15 sub5>leaf16 sub5>leaf17".split(),
    ),
]

MIND_MAP_TEMPLATES_BY_ID: Dict[str, MindMapTemplate] = {t.id: t for t in MIND_MAP_TEMPLATES}
