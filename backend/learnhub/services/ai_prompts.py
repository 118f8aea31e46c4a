"""
Prompt templates for AI content generation (constants only, no logic).

Every JSON-producing prompt embeds an explicit example of the expected
structure plus JSON_FORMAT_RULES, which keeps model output close to strict
JSON so the repair pipeline has less to fix. Placeholders use str.format;
literal braces are doubled.
"""

JSON_FORMAT_RULES = """FORMATTING RULES (MANDATORY):
- Respond with JSON only. Do not wrap it in markdown code fences and do not add any text before or after it.
- Use double quotes for every key and string value. Never use backticks or single quotes as string delimiters.
- Write line breaks inside strings as \\n and tabs as \\t; never put a raw line break inside a string.
- Escape double quotes inside strings as \\"."""

# Content variations (plain markdown, not JSON)
VARIATION_INSTRUCTIONS = {
    "explanation": "Provide a clear, comprehensive explanation of the topic suitable for {level} learners.",
    "example": "Provide practical code examples demonstrating the topic for {level} learners.",
    "analogy": "Provide real-world analogies to help {level} learners understand this concept.",
    "summary": "Provide a concise summary of the key points for {level} learners.",
    "deep_dive": "Provide an in-depth, detailed exploration of the topic for {level} learners.",
}

CONTENT_VARIATION_SYSTEM = (
    "You are an expert instructor writing learning material. "
    "Write in well-structured markdown."
)

# Placeholders: {topic_title}, {topic_content}, {instruction}, {level}
CONTENT_VARIATION_PROMPT = """Topic: {topic_title}

Current Content:
{topic_content}

Task: {instruction}

Target Audience: {level} level learners

Please generate content that is:
- Clear and well-structured
- Uses appropriate technical depth for {level} level
- Includes code examples where relevant (with syntax highlighting markers)
- Uses markdown formatting for better readability

Generate the content now:"""

EXERCISE_SYSTEM = (
    "You are an expert programming instructor creating educational exercises. "
    'Return a single JSON object with the keys "title", "description", "instructions", '
    '"starterCode" and "solutionCode".'
)

# Placeholders: {language}, {level}, {topic_title}, {topic_content}, {requirements}, {format_rules}
EXERCISE_PROMPT = """Create a {language} programming exercise for {level} learners on the topic: "{topic_title}"

Topic Content:
{topic_content}
{requirements}
Create an exercise with:
1. A clear, concise title
2. A description explaining what the exercise teaches
3. Detailed instructions for what the learner should implement
4. Starter code (template with TODOs or function signatures)
5. A complete solution (working code)

Return the exercise in this exact JSON format:
{{
  "title": "Exercise title here",
  "description": "What this exercise teaches",
  "instructions": "Step-by-step instructions",
  "starterCode": "// Starter code template",
  "solutionCode": "// Complete working solution"
}}

Make sure the exercise is:
- Appropriate for {level} level
- Focused on one clear learning objective
- Has testable inputs/outputs
- Includes helpful comments

{format_rules}"""

HINTS_SYSTEM = (
    "You are an expert programming instructor creating progressive hints. "
    "Return a JSON array of strings only."
)

# Placeholders: {num_hints}, {exercise_title}, {exercise_description}, {solution_code}, {format_rules}
HINTS_PROMPT = """Given this programming exercise, generate {num_hints} progressive hints that guide learners toward the solution WITHOUT giving away the answer directly.

Exercise Title: {exercise_title}
Description: {exercise_description}

Solution Code (for reference only, do NOT include in hints):
{solution_code}

Requirements for hints:
1. Hint 1: Gentle nudge about the approach (most vague)
2. Hint 2: Explain the key concept needed
3. Hint 3: Describe the algorithm or steps
4. Hint 4 (if needed): Provide pseudocode
5. Hint 5 (if needed): Almost reveal the solution but stop short

Return exactly {num_hints} hints as a JSON array of strings:
["Hint 1 text", "Hint 2 text", "Hint 3 text"]

{format_rules}"""

TEST_CASES_SYSTEM = (
    "You are an expert test engineer creating comprehensive test cases. "
    "Return a JSON array only."
)

# Placeholders: {num_test_cases}, {language}, {exercise_title}, {exercise_description}, {solution_code}, {format_rules}
TEST_CASES_PROMPT = """Generate {num_test_cases} test cases for this {language} programming exercise.

Exercise Title: {exercise_title}
Description: {exercise_description}

Solution Code:
{solution_code}

Requirements:
1. Include basic test cases (expected inputs)
2. Include edge cases (empty, null, boundary values)
3. Include stress tests (large inputs)
4. For each test case, provide:
   - test_name: descriptive name
   - test_type: "public" (shown to learners), "hidden" (for grading only) or "edge_case"
   - input_data: {{"args": [arg1, arg2, ...]}}
   - expected_output: {{"result": expectedValue}}

Return as JSON array:
[
  {{
    "test_name": "Basic addition",
    "test_type": "public",
    "input_data": {{"args": [1, 2]}},
    "expected_output": {{"result": 3}}
  }}
]

{format_rules}"""

TOPICS_SYSTEM = (
    "You are an expert curriculum designer creating structured learning topics. "
    "Return a JSON array only."
)

# Placeholders: {num_topics}, {domain}, {curriculum_title}, {curriculum_description}, {level}, {format_rules}
TOPICS_PROMPT = """Generate {num_topics} learning topics for a curriculum in the {domain} domain.

Curriculum Title: {curriculum_title}
Curriculum Description: {curriculum_description}
Difficulty Level: {level}
Domain: {domain}

Requirements:
1. Each topic should build on previous ones (logical progression)
2. Topics should be appropriate for {level} level learners
3. Each topic should have:
   - title: Clear, concise title (3-8 words)
   - description: What the topic covers (2-3 sentences)
   - suggestedContent: Brief outline or key points to cover (optional)
   - estimatedDurationMinutes: Estimated time to complete (15-120 minutes)

Return as JSON array:
[
  {{
    "title": "Introduction to Variables",
    "description": "Learn about variables, data types, and how to declare and use them in programming.",
    "suggestedContent": "1. What are variables\\n2. Variable declaration\\n3. Common data types",
    "estimatedDurationMinutes": 30
  }}
]

{format_rules}"""

OBJECTIVES_SYSTEM = (
    "You are an expert instructional designer creating learning objectives using Bloom's Taxonomy. "
    "Return a JSON array of strings only."
)

# Placeholders: {num_objectives}, {topic_title}, {topic_details}, {level}, {format_rules}
OBJECTIVES_PROMPT = """Generate {num_objectives} specific, measurable learning objectives for this topic.

Topic Title: {topic_title}
{topic_details}
Difficulty Level: {level}

Requirements:
1. Use action verbs (understand, explain, implement, analyze, create, etc.)
2. Make each objective specific and measurable
3. Appropriate for {level} level learners
4. Focus on what learners will be able to DO after completing the topic
5. Follow Bloom's Taxonomy principles
6. Each objective should be 1-2 sentences

Examples:
- "Explain the difference between var, let, and const in JavaScript"
- "Implement functions using arrow syntax and understand their scope behavior"
- "Analyze code to identify and fix common variable scoping issues"

Return as JSON array of strings:
["Objective 1", "Objective 2", "Objective 3"]

{format_rules}"""

QUIZ_SYSTEM = (
    "You are an expert educator creating assessment questions. Generate clear, unambiguous "
    "quiz questions that accurately test knowledge. Return a JSON array only."
)

# Placeholders: {num_questions}, {topic_title}, {topic_details}, {level}, {format_rules}
QUIZ_PROMPT = """Generate {num_questions} multiple-choice quiz questions to test understanding of this topic.

Topic: {topic_title}
{topic_details}
Difficulty Level: {level}

CRITICAL REQUIREMENTS:
1. Questions MUST test specific knowledge from "{topic_title}"
2. Each question should have 4 answer options (A, B, C, D)
3. Only ONE option should be correct
4. Include brief explanations for why each answer is correct/incorrect
5. Questions should progress from basic recall to application/analysis
6. Avoid ambiguous or trick questions

Return as JSON array in this EXACT format:
[
  {{
    "question": "Question text here?",
    "options": [
      {{"text": "Option A", "isCorrect": false, "explanation": "Why this is wrong"}},
      {{"text": "Option B", "isCorrect": true, "explanation": "Why this is correct"}},
      {{"text": "Option C", "isCorrect": false, "explanation": "Why this is wrong"}},
      {{"text": "Option D", "isCorrect": false, "explanation": "Why this is wrong"}}
    ],
    "explanation": "Overall explanation of the concept being tested"
  }}
]

{format_rules}"""

REVIEW_SYSTEM = (
    "You are an experienced curriculum reviewer and instructional designer. You evaluate "
    "learning topics critically and constructively. Return a single JSON object only."
)

# Placeholders: {topic_title}, {topic_description}, {topic_content}, {objectives}, {exercises}, {quizzes}, {format_rules}
REVIEW_PROMPT = """Review the quality of this learning topic and its learning materials.

Topic: {topic_title}
Description: {topic_description}

Content:
{topic_content}

Learning Objectives:
{objectives}

Exercises:
{exercises}

Quizzes:
{quizzes}

Evaluate:
1. alignment: do exercises and quizzes assess the stated objectives?
2. coverage: are all objectives covered by content, exercises or quizzes?
3. quality: is the content accurate, clear and well organized?
4. difficulty: is the difficulty consistent with the intended level?
5. completeness: is anything important missing?
6. pedagogy: does the material support effective learning?

For each problem found, report a finding with:
- category: one of "alignment", "coverage", "quality", "difficulty", "completeness", "pedagogy"
- severity: one of "critical", "warning", "suggestion"
- title: short summary
- description: what is wrong and why it matters
- affectedItems: names of the objectives, exercises or quizzes concerned
- suggestion: a concrete improvement

Return a JSON object in this EXACT format:
{{
  "overallScore": 75,
  "summary": "Two to three sentence overall assessment",
  "findings": [
    {{
      "category": "alignment",
      "severity": "warning",
      "title": "Quiz does not assess objective 2",
      "description": "Objective 2 asks learners to implement X but no quiz question covers it.",
      "affectedItems": ["Objective 2"],
      "suggestion": "Add a question that asks learners to apply X."
    }}
  ]
}}

overallScore is an integer from 0 to 100.

{format_rules}"""

DEEP_DIVE_SYSTEM = (
    "You are an experienced curriculum reviewer. You analyze a single review finding in depth "
    "and give actionable, specific guidance. Return a single JSON object only."
)

# Placeholders: {topic_title}, {topic_content}, {objectives}, {exercises}, {quizzes},
# {category}, {severity}, {finding_title}, {finding_description}, {affected_items}, {suggestion}, {format_rules}
DEEP_DIVE_PROMPT = """Analyze this review finding for the learning topic "{topic_title}" in depth.

Topic Content:
{topic_content}

Learning Objectives:
{objectives}

Exercises:
{exercises}

Quizzes:
{quizzes}

Finding:
- Category: {category}
- Severity: {severity}
- Title: {finding_title}
- Description: {finding_description}
- Affected items: {affected_items}
- Current suggestion: {suggestion}

Provide:
1. enhancedDescription: a detailed explanation of the problem, citing specific parts of the material
2. enhancedSuggestion: step-by-step, concrete changes that would resolve it (include example text or code where useful)
3. enhancedAffectedItems: the complete list of affected objectives, exercises or quizzes

Return a JSON object in this EXACT format:
{{
  "enhancedDescription": "Detailed description",
  "enhancedSuggestion": "Step-by-step suggestion",
  "enhancedAffectedItems": ["Objective 1", "Exercise: Sum two numbers"]
}}

{format_rules}"""
