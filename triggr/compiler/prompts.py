"""Prompt templates for the LLM-backed generators."""

TOOL_CONFIG_PROMPT = """
You are an expert AI system that converts a workflow into an agent-based instruction configuration.

STRICT OUTPUT RULES:
- Output ONLY valid JSON.
- Do NOT include explanations, comments, markdown, or extra text.
- Follow the schema EXACTLY. Do not rename, remove, or add keys.
- Use realistic and complete values for every field.
- Boolean values must be true or false (not strings).
- Arrays must never be empty unless explicitly allowed.

PARAMETER RULES:
- If method is GET -> parameters represent query parameters or URL path parameters.
- If method is POST -> parameters represent request body fields.
- Parameters must include correct data types (string, number, boolean, object, array).
- Extract parameter names from URL placeholders like {paramName} and include them in parameters.

URL PARAMETER RULES:
- If URL contains {paramName}, extract "paramName" as a parameter with type "string".
- Example: URL "https://api.weather.com/v1/current.json?q={cityName}" -> parameters: {"cityName": "string"}

AUTHENTICATION RULES:
- authType can be: "none", "bearer", "query", or "header"
- "bearer": Sends API key as "Authorization: Bearer <key>" header
- "query": Appends API key as query parameter using apiKeyName (e.g., ?key=<apiKey>)
- "header": Sends API key as custom header using apiKeyName (e.g., X-API-Key: <key>)
- Copy authType, apiKey, and apiKeyName directly from the input settings if provided

JSON SCHEMA TO FOLLOW:
{
  "systemPrompt": "",
  "primaryAgentName": "",
  "agents": [
    {
      "id": "agent-id",
      "name": "",
      "model": "",
      "includeHistory": true,
      "output": "",
      "tools": ["tool-id"],
      "instruction": ""
    }
  ],
  "tools": [
    {
      "id": "tool-id",
      "name": "",
      "description": "",
      "method": "GET" | "POST",
      "url": "",
      "headers": {},
      "authType": "none" | "bearer" | "query" | "header",
      "apiKey": "",
      "apiKeyName": "",
      "parameters": {
        "parameterName": "dataType"
      },
      "usage": [],
      "assignedAgent": ""
    }
  ]
}

Generate the final JSON strictly according to this schema.
"""

CODEGEN_SYSTEM_PROMPT = (
    "You are a code generator. Output only valid JavaScript code without any "
    "markdown formatting, code blocks, or explanations. The code should be "
    "directly executable."
)

CODEGEN_USER_PROMPT = """You are an expert JavaScript developer. Convert the following AI agent workflow configuration into clean, executable JavaScript code.

The workflow represents an AI agent system with nodes and edges. Generate code that:
1. Uses async/await patterns
2. Handles API calls with fetch
3. Implements conditional logic (if/else nodes)
4. Implements loops (while nodes)
5. Handles user approval prompts
6. Is well-commented and production-ready

WORKFLOW CONFIGURATION:
{flow_config}

IMPORTANT RULES:
- Generate ONLY JavaScript code, no markdown formatting
- Use modern ES6+ syntax
- Create a main async function called 'runWorkflow' that executes the entire flow
- For API nodes, use the fetch API with proper error handling
- For Agent nodes, create placeholder functions that can be replaced with actual AI calls
- For UserApproval nodes, use a simple prompt/confirm pattern
- Export the runWorkflow function
- Include helpful comments explaining each step
- Handle authentication based on authType (bearer, query, header, or none)

Generate the complete JavaScript code:"""
