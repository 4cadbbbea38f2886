def to_json_name(name: str) -> str:
    """
    Convert a declared protobuf field name into its lowerCamelCase JSON name,
    following protoc: underscores are dropped and the character after each one
    is upper-cased.
    """
    result = []
    capitalize_next = False
    for c in name:
        if c == "_":
            capitalize_next = True
        elif capitalize_next:
            result.append(c.upper())
            capitalize_next = False
        else:
            result.append(c)
    return "".join(result)
