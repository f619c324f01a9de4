"""Fixed text of the generated Go source file."""

# Reproduced verbatim from the upstream message sources.
LICENSE_HEADER = """\
/****************************************************************************
The contents of this file are subject to the Interbase Public
License Version 1.0 (the "License"); you may not use this file
except in compliance with the License. You may obtain a copy
of the License at http://www.Inprise.com/IPL.html

Software distributed under the License is distributed on an
"AS IS" basis, WITHOUT WARRANTY OF ANY KIND, either express
or implied. See the License for the specific language governing
rights and limitations under the License.

*****************************************************************************/
"""

DEFAULT_PACKAGE = "firebirdsql"
DEFAULT_VARIABLE = "errmsgs"
DEFAULT_OUTPUT = "errmsgs.go"
