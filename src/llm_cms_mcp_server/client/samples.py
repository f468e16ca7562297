"""Sample posts inserted by the ``seed`` command."""

SAMPLE_POSTS = [
    {
        "title": "Introduction to TypeScript",
        "author": "Antonio Mambo",
        "content": """TypeScript is a programming language developed by Microsoft that adds static typing to JavaScript.

## Key Benefits:
- Errors caught while developing
- Better autocomplete and IntelliSense
- Safer refactoring
- Living documentation through types

## Example:
```typescript
interface User {
  id: number;
  name: string;
  email: string;
}

function greetUser(user: User): string {
  return `Hello, ${user.name}!`;
}
```

TypeScript is widely used in modern projects and underpins frameworks such as Angular.""",
    },
    {
        "title": "A Complete Guide to MongoDB",
        "author": "Maria Silva",
        "content": """MongoDB is a document-oriented NoSQL database that stores data as JSON-like documents (BSON).

## Main Features:
- Flexible schema
- High performance
- Horizontal scaling
- Powerful queries

## CRUD Operations:
- **Create**: insertOne(), insertMany()
- **Read**: find(), findOne()
- **Update**: updateOne(), updateMany()
- **Delete**: deleteOne(), deleteMany()

MongoDB suits applications that need flexibility and scale.""",
    },
    {
        "title": "The Model Context Protocol (MCP) Explained",
        "author": "João Santos",
        "content": """The Model Context Protocol (MCP) is an open protocol that lets Large Language Models interact with external systems in a standard way.

## MCP Building Blocks:
1. **Tools** - actions the model can run
2. **Resources** - data the model can read
3. **Prompts** - templates that guide the model

## Use Cases:
- Database access
- API integration
- Task automation
- Content management""",
    },
    {
        "title": "Async/Await in JavaScript",
        "author": "Pedro Costa",
        "content": """Async/await is modern syntax for asynchronous JavaScript that keeps code readable.

## Before (callbacks):
```javascript
getData(function(data) {
  processData(data, function(result) {
    saveResult(result, function() {
      console.log("Done!");
    });
  });
});
```

## After (async/await):
```javascript
async function workflow() {
  const data = await getData();
  const result = await processData(data);
  await saveResult(result);
  console.log("Done!");
}
```""",
    },
    {
        "title": "REST API Best Practices",
        "author": "Ana Oliveira",
        "content": """REST (Representational State Transfer) is an architectural style for building scalable, maintainable web APIs.

## REST Principles:
1. **Stateless** - every request stands alone
2. **Client-Server** - separated responsibilities
3. **Cacheable** - responses may be cached
4. **Uniform Interface** - consistent interface

## Example Endpoints:
```
GET    /api/posts       -> list posts
GET    /api/posts/:id   -> fetch a post
POST   /api/posts       -> create a post
PUT    /api/posts/:id   -> update a post
DELETE /api/posts/:id   -> delete a post
```""",
    },
]
