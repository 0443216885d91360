"IRC client library: line parser, registration state machine and listener dispatch."
