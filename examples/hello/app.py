"""Hello World -- the simplest mustachio example.

Compile a template from a string and render it with context variables.
No templates directory needed.

Run:
    python app.py
"""

from mustachio import Environment

env = Environment()

# Compile from string
template = env.from_string("Hello, {{ name }}!")

# Render with context
output = template.render(name="World")


def main() -> None:
    print(output)
    print()

    # Multiple renders with different context
    for name in ["Mustache", "Handlebars", "Python"]:
        print(template.render(name=name))

    # HTML templates escape values
    print(template.render(name="<script>"))


if __name__ == "__main__":
    main()
