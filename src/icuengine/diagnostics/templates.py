"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and consistently worded, and documents every
    error case in one place.
    """

    # =========================================================================
    # Syntax errors
    # =========================================================================

    @staticmethod
    def unterminated_argument(name: str | None, span: SourceSpan) -> Diagnostic:
        """Argument opened with '{' but never closed.

        Args:
            name: Argument name if it was read before input ended
            span: Location of the opening brace

        Returns:
            Diagnostic for UNTERMINATED_ARGUMENT
        """
        if name:
            msg = f"Argument '{name}' is not closed"
        else:
            msg = "Argument is not closed"
        return Diagnostic(
            code=DiagnosticCode.UNTERMINATED_ARGUMENT,
            message=msg,
            span=span,
            hint="Add a closing '}' or quote a literal brace as '{'",
            argument_name=name,
        )

    @staticmethod
    def empty_argument(span: SourceSpan) -> Diagnostic:
        """Braces with no argument name: '{}'.

        Args:
            span: Location of the opening brace

        Returns:
            Diagnostic for EMPTY_ARGUMENT
        """
        return Diagnostic(
            code=DiagnosticCode.EMPTY_ARGUMENT,
            message="Empty argument",
            span=span,
            hint="Put an argument name between the braces, e.g. '{name}'",
        )

    @staticmethod
    def invalid_argument_name(found: str, span: SourceSpan) -> Diagnostic:
        """Argument name contains a disallowed character.

        Args:
            found: Offending character
            span: Location of the offending character

        Returns:
            Diagnostic for INVALID_ARGUMENT_NAME
        """
        msg = f"Unexpected character {found!r} in argument"
        return Diagnostic(
            code=DiagnosticCode.INVALID_ARGUMENT_NAME,
            message=msg,
            span=span,
            hint="Argument names use letters, digits, '_', '-' and '.'",
        )

    @staticmethod
    def unknown_argument_type(
        argument_name: str, type_name: str, span: SourceSpan
    ) -> Diagnostic:
        """Argument type keyword is not recognized.

        Args:
            argument_name: Argument the type was attached to
            type_name: Unrecognized keyword
            span: Location of the keyword

        Returns:
            Diagnostic for UNKNOWN_ARGUMENT_TYPE
        """
        msg = f"Unknown argument type '{type_name}' for argument '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_ARGUMENT_TYPE,
            message=msg,
            span=span,
            hint="Use one of: number, date, time, plural, selectordinal, select",
            argument_name=argument_name,
        )

    @staticmethod
    def expected_argument_style(
        argument_name: str, type_name: str, span: SourceSpan
    ) -> Diagnostic:
        """Comma after a formatter type but no style followed.

        Args:
            argument_name: Argument being parsed
            type_name: Formatter type keyword
            span: Location where the style was expected

        Returns:
            Diagnostic for EXPECTED_ARGUMENT_STYLE
        """
        msg = f"Expected a style for {type_name} argument '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.EXPECTED_ARGUMENT_STYLE,
            message=msg,
            span=span,
            hint="Use a style name such as 'short' or a skeleton such as '::yMd'",
            argument_name=argument_name,
        )

    @staticmethod
    def invalid_skeleton(skeleton: str, reason: str, span: SourceSpan) -> Diagnostic:
        """Skeleton contains unsupported symbols or tokens.

        Args:
            skeleton: Skeleton text (without the '::' prefix)
            reason: What is wrong with it
            span: Location of the offending symbol

        Returns:
            Diagnostic for INVALID_SKELETON
        """
        msg = f"Invalid skeleton '{skeleton}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_SKELETON,
            message=msg,
            span=span,
            format_name=skeleton,
        )

    @staticmethod
    def missing_other_branch(argument_name: str, span: SourceSpan) -> Diagnostic:
        """Plural or select construct lacks the mandatory 'other' branch.

        Args:
            argument_name: Selector argument
            span: Location of the construct's opening brace

        Returns:
            Diagnostic for MISSING_OTHER_BRANCH
        """
        msg = f"Argument '{argument_name}' has no 'other' branch"
        return Diagnostic(
            code=DiagnosticCode.MISSING_OTHER_BRANCH,
            message=msg,
            span=span,
            hint="Add an 'other {...}' branch",
            argument_name=argument_name,
        )

    @staticmethod
    def duplicate_selector(
        argument_name: str, selector: str, span: SourceSpan
    ) -> Diagnostic:
        """Same selector declared twice in one construct.

        Args:
            argument_name: Selector argument
            selector: Repeated selector
            span: Location of the second occurrence

        Returns:
            Diagnostic for DUPLICATE_SELECTOR
        """
        msg = f"Duplicate selector '{selector}' for argument '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_SELECTOR,
            message=msg,
            span=span,
            argument_name=argument_name,
        )

    @staticmethod
    def invalid_selector(argument_name: str, found: str, span: SourceSpan) -> Diagnostic:
        """Branch selector is not an identifier or '=N'.

        Args:
            argument_name: Selector argument
            found: Offending text
            span: Location of the selector

        Returns:
            Diagnostic for INVALID_SELECTOR
        """
        msg = f"Invalid selector {found!r} for argument '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.INVALID_SELECTOR,
            message=msg,
            span=span,
            hint="Selectors are identifiers (one, other, male) or exact values (=0)",
            argument_name=argument_name,
        )

    @staticmethod
    def expected_branch_body(selector: str, span: SourceSpan) -> Diagnostic:
        """Selector not followed by a '{...}' body.

        Args:
            selector: Selector missing its body
            span: Location where '{' was expected

        Returns:
            Diagnostic for EXPECTED_BRANCH_BODY
        """
        msg = f"Expected '{{' after selector '{selector}'"
        return Diagnostic(
            code=DiagnosticCode.EXPECTED_BRANCH_BODY,
            message=msg,
            span=span,
        )

    @staticmethod
    def invalid_offset(argument_name: str, span: SourceSpan) -> Diagnostic:
        """'offset:' not followed by an integer.

        Args:
            argument_name: Plural argument
            span: Location of the offset value

        Returns:
            Diagnostic for INVALID_OFFSET
        """
        msg = f"Invalid offset for argument '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.INVALID_OFFSET,
            message=msg,
            span=span,
            hint="Write the offset as 'offset:1' before the first branch",
            argument_name=argument_name,
        )

    @staticmethod
    def offset_not_allowed(argument_name: str, span: SourceSpan) -> Diagnostic:
        """'offset:' used in a select construct.

        Args:
            argument_name: Select argument
            span: Location of the offset

        Returns:
            Diagnostic for OFFSET_NOT_ALLOWED
        """
        msg = f"Offset is only allowed in plural arguments, not select '{argument_name}'"
        return Diagnostic(
            code=DiagnosticCode.OFFSET_NOT_ALLOWED,
            message=msg,
            span=span,
            argument_name=argument_name,
        )

    @staticmethod
    def unterminated_tag(tag_name: str, span: SourceSpan) -> Diagnostic:
        """Tag opened but never closed.

        Args:
            tag_name: Open tag name
            span: Location of the opening tag

        Returns:
            Diagnostic for UNTERMINATED_TAG
        """
        msg = f"Tag <{tag_name}> is not closed"
        return Diagnostic(
            code=DiagnosticCode.UNTERMINATED_TAG,
            message=msg,
            span=span,
            hint=f"Add </{tag_name}>",
            tag_name=tag_name,
        )

    @staticmethod
    def mismatched_tag(open_name: str, close_name: str, span: SourceSpan) -> Diagnostic:
        """Closing tag name does not match the open tag.

        Args:
            open_name: Currently open tag
            close_name: Closing tag encountered
            span: Location of the closing tag

        Returns:
            Diagnostic for MISMATCHED_TAG
        """
        msg = f"Closing tag </{close_name}> does not match <{open_name}>"
        return Diagnostic(
            code=DiagnosticCode.MISMATCHED_TAG,
            message=msg,
            span=span,
            hint=f"Close <{open_name}> before closing <{close_name}>",
            tag_name=open_name,
        )

    @staticmethod
    def unmatched_closing_tag(tag_name: str, span: SourceSpan) -> Diagnostic:
        """Closing tag with no open tag.

        Args:
            tag_name: Closing tag name
            span: Location of the closing tag

        Returns:
            Diagnostic for UNMATCHED_CLOSING_TAG
        """
        msg = f"Closing tag </{tag_name}> has no matching opening tag"
        return Diagnostic(
            code=DiagnosticCode.UNMATCHED_CLOSING_TAG,
            message=msg,
            span=span,
            hint="Write a literal '<' followed by '/' as \"'<'/\"",
            tag_name=tag_name,
        )

    @staticmethod
    def invalid_tag(detail: str, span: SourceSpan) -> Diagnostic:
        """Malformed tag syntax, e.g. attributes or a missing '>'.

        Args:
            detail: What is wrong
            span: Location of the tag

        Returns:
            Diagnostic for INVALID_TAG
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_TAG,
            message=f"Invalid tag: {detail}",
            span=span,
            hint="Tags are written <name>...</name> without attributes",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: SourceSpan) -> Diagnostic:
        """Template nests arguments or tags beyond the parser limit.

        Args:
            max_depth: Configured limit
            span: Location of the construct that crossed the limit

        Returns:
            Diagnostic for NESTING_DEPTH_EXCEEDED
        """
        msg = f"Nesting depth exceeds maximum of {max_depth}"
        return Diagnostic(
            code=DiagnosticCode.NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=span,
            hint="Flatten the message or raise max_nesting_depth",
        )

    # =========================================================================
    # Evaluation errors
    # =========================================================================

    @staticmethod
    def argument_not_provided(argument_name: str) -> Diagnostic:
        """Binding missing or None.

        Args:
            argument_name: Argument without a value

        Returns:
            Diagnostic for ARGUMENT_NOT_PROVIDED
        """
        msg = f"Argument '{argument_name}' not provided"
        return Diagnostic(
            code=DiagnosticCode.ARGUMENT_NOT_PROVIDED,
            message=msg,
            hint=f"Pass '{argument_name}' in the arguments mapping",
            argument_name=argument_name,
        )

    @staticmethod
    def type_mismatch(argument_name: str, expected: str, received: object) -> Diagnostic:
        """Binding type does not fit the construct consuming it.

        Args:
            argument_name: Argument with the wrong type
            expected: Description of accepted types
            received: The offending value

        Returns:
            Diagnostic for TYPE_MISMATCH
        """
        received_type = type(received).__name__
        msg = f"Argument '{argument_name}' must be {expected}, got {received_type}"
        return Diagnostic(
            code=DiagnosticCode.TYPE_MISMATCH,
            message=msg,
            argument_name=argument_name,
            expected_type=expected,
            received_type=received_type,
        )

    @staticmethod
    def tag_not_provided(tag_name: str) -> Diagnostic:
        """Tag used in the template without a substitution function.

        Args:
            tag_name: Tag name

        Returns:
            Diagnostic for TAG_NOT_PROVIDED
        """
        msg = f"Tag <{tag_name}> has no substitution function"
        return Diagnostic(
            code=DiagnosticCode.TAG_NOT_PROVIDED,
            message=msg,
            hint=f"Pass a callable under '{tag_name}' in the arguments mapping",
            tag_name=tag_name,
        )

    @staticmethod
    def tag_result_invalid(tag_name: str, received: object) -> Diagnostic:
        """Text-mode tag function returned a non-string.

        Args:
            tag_name: Tag name
            received: The returned value

        Returns:
            Diagnostic for TAG_RESULT_INVALID
        """
        received_type = type(received).__name__
        msg = f"Tag <{tag_name}> returned {received_type}, which cannot be rendered as text"
        return Diagnostic(
            code=DiagnosticCode.TAG_RESULT_INVALID,
            message=msg,
            hint="Return a str from the tag function or use format_rich()",
            tag_name=tag_name,
            expected_type="str",
            received_type=received_type,
        )

    @staticmethod
    def format_not_found(kind: str, format_name: str) -> Diagnostic:
        """Style name not registered for the formatter kind.

        Args:
            kind: Formatter kind (number, date, time, list)
            format_name: Unknown style name

        Returns:
            Diagnostic for FORMAT_NOT_FOUND
        """
        msg = f"Unknown {kind} format '{format_name}'"
        return Diagnostic(
            code=DiagnosticCode.FORMAT_NOT_FOUND,
            message=msg,
            hint=f"Register '{format_name}' under formats['{kind}']",
            format_name=format_name,
        )

    @staticmethod
    def formatting_failed(kind: str, value: object, reason: str) -> Diagnostic:
        """Primitive formatter rejected a value.

        Args:
            kind: Formatter kind
            value: Value that failed
            reason: Underlying error text

        Returns:
            Diagnostic for FORMATTING_FAILED
        """
        msg = f"{kind.capitalize()} formatting failed for {value!r}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.FORMATTING_FAILED,
            message=msg,
            received_type=type(value).__name__,
        )

    @staticmethod
    def expression_depth_exceeded(max_depth: int) -> Diagnostic:
        """Evaluation recursion exceeded the depth guard.

        Args:
            max_depth: Configured limit

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded during evaluation"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Reduce nesting of plural/select/tag constructs",
        )

    # =========================================================================
    # Configuration errors
    # =========================================================================

    @staticmethod
    def invalid_format_option(kind: str, option: str, value: object, reason: str) -> Diagnostic:
        """Option value outside its allowed domain.

        Args:
            kind: Format kind the option belongs to
            option: Option name
            value: Offending value
            reason: Allowed domain

        Returns:
            Diagnostic for INVALID_FORMAT_OPTION
        """
        msg = f"Invalid {kind} option {option}={value!r}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_FORMAT_OPTION,
            message=msg,
            received_type=type(value).__name__,
        )

    @staticmethod
    def invalid_format_config(kind: str, format_name: str, reason: str) -> Diagnostic:
        """Named format registration is malformed.

        Args:
            kind: Format kind
            format_name: Registration name
            reason: What is wrong

        Returns:
            Diagnostic for INVALID_FORMAT_CONFIG
        """
        msg = f"Invalid {kind} format '{format_name}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_FORMAT_CONFIG,
            message=msg,
            format_name=format_name,
        )

    # =========================================================================
    # Lookup errors
    # =========================================================================

    @staticmethod
    def message_not_found(message_key: str, locale: str) -> Diagnostic:
        """Message store has no template for the key.

        Args:
            message_key: Requested key
            locale: Locale searched

        Returns:
            Diagnostic for MESSAGE_NOT_FOUND
        """
        msg = f"Message '{message_key}' not found for locale '{locale}'"
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_FOUND,
            message=msg,
            hint="Check that the message is defined in the message store",
            message_key=message_key,
        )
