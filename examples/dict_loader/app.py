"""DictLoader -- in-memory templates without filesystem.

Templates from a dictionary. No templates directory needed.
Use case: tests, generated templates, single-file apps.

Run:
    python app.py
"""

from mustachio import DictLoader, Environment

templates = {
    "base": """\
<!DOCTYPE html>
<html>
<head><title>{{ title }}</title></head>
<body>
    <nav>
    {{# nav_items }}
        <a href="{{ url }}">{{ label }}</a>
    {{/ nav_items }}
    </nav>
    <main>{{$ content }}{{/ content }}</main>
</body>
</html>
""",
    "page": """\
{{< base }}
{{$ content }}
    <h1>{{ heading }}</h1>
    <p>{{ message }}</p>
{{/ content }}
{{/ base }}
""",
}

env = Environment(loader=DictLoader(templates))
template = env.get_template("page")

output = template.render(
    title="DictLoader Demo",
    nav_items=[
        {"url": "/", "label": "Home"},
        {"url": "/about", "label": "About"},
    ],
    heading="In-Memory Templates",
    message="No filesystem required. Templates loaded from a dict.",
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
