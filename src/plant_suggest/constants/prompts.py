"""Prompt & schema definitions used when querying Gemini."""

EDIT_PROMPT = (
    "Analyze the context of this image (e.g., indoor room, outdoor garden, balcony). "
    "Based on the context and available empty space, add photorealistic, high-detail plants. "
    "If the space is large enough and the context is appropriate (like outdoors), you can also add "
    "suitable small trees. The result must be a sharp, high-resolution, high-quality photograph, "
    "with clear details suitable for zooming in."
)

FLORA_PROMPT = (
    "I have provided two images. The second is an edited version of the first, where plants or trees "
    "were added. Please identify only the plants or trees that were added. For each added item, provide "
    "its common name, a brief description, some simple care tips, and a normalized bounding box. "
    "The bounding box should have x, y, width, and height values between 0 and 1, where (x, y) is the "
    "top-left corner. Provide your response in the requested JSON format. If no plants or trees were "
    "added or you cannot identify them, return an empty list."
)

# Status messages shown while each stage is running
EDITING_MESSAGE = "Analyzing scene & adding flora..."
IDENTIFYING_MESSAGE = "Identifying new plants & trees..."


# The schema will be supplied to Gemini via `response_schema`.
# We keep it in a plain dict so we don't import Pydantic here (faster cold start).

def flora_response_schema():
    return {
        "type": "object",
        "required": ["flora"],
        "properties": {
            "flora": {
                "type": "array",
                "description": "A list of plants or trees identified in the image.",
                "items": {
                    "type": "object",
                    "required": ["name", "description", "care_tips", "boundingBox"],
                    "properties": {
                        "name": {
                            "type": "string",
                            "description": "The common name of the plant or tree.",
                        },
                        "description": {
                            "type": "string",
                            "description": "A brief description of the plant or tree.",
                        },
                        "care_tips": {
                            "type": "string",
                            "description": "Simple care instructions for the plant or tree.",
                        },
                        "boundingBox": {
                            "type": "object",
                            "description": "Normalized coordinates of the item's location.",
                            "required": ["x", "y", "width", "height"],
                            "properties": {
                                "x": {"type": "number"},
                                "y": {"type": "number"},
                                "width": {"type": "number"},
                                "height": {"type": "number"},
                            },
                        },
                    },
                },
            }
        },
    }
